"""
Email service.

Sends mail via SMTP using aiosmtplib.  Used when an admin grants a
customer portal access.  Nothing is sent unless EMAIL_ENABLED is set.
"""

import logging
from email.message import EmailMessage
from html import escape

import aiosmtplib

from contracthub.core.config import settings

logger = logging.getLogger(__name__)

SMTPS_PORT = 465


def build_message(to: str, subject: str, text_body: str, html_body: str | None = None) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.SENDER_EMAIL
    message["To"] = to
    message["Subject"] = subject
    message.set_content(text_body)
    if html_body is not None:
        message.add_alternative(html_body, subtype="html")
    return message


async def send_email(message: EmailMessage) -> None:
    """Deliver a prepared message.  Port 465 uses implicit TLS, anything else STARTTLS."""
    implicit_tls = settings.EMAIL_PORT == SMTPS_PORT
    try:
        await aiosmtplib.send(
            message,
            hostname=settings.EMAIL_HOST,
            port=settings.EMAIL_PORT,
            username=settings.SENDER_EMAIL or None,
            password=settings.EMAIL_PASSWORD or None,
            use_tls=implicit_tls,
            start_tls=not implicit_tls,
        )
    except aiosmtplib.SMTPException:
        logger.exception("Failed to send %r to %s", message["Subject"], message["To"])
        raise
    logger.info("Sent %r to %s", message["Subject"], message["To"])


def portal_access_message(to_email: str, customer_name: str) -> EmailMessage:
    login_link = f"{settings.FRONTEND_URL}/customer-portal/login"
    subject = f"Your {settings.APP_NAME} customer portal access"
    text_body = (
        f"Hello {customer_name},\n\n"
        f"A customer portal account has been created for you on {settings.APP_NAME}.\n"
        "Sign in with this email address and the password your account manager gave you:\n\n"
        f"    {login_link}\n"
    )
    html_body = (
        "<html><body style=\"font-family: Arial, sans-serif; color: #333;\">"
        f"<p>Hello {escape(customer_name)},</p>"
        f"<p>A customer portal account has been created for you on <strong>{escape(settings.APP_NAME)}</strong>.</p>"
        "<p>Sign in with this email address and the password your account manager gave you:</p>"
        f"<p><a href=\"{escape(login_link)}\">{escape(login_link)}</a></p>"
        "</body></html>"
    )
    return build_message(to_email, subject, text_body, html_body)


async def send_portal_access_email(to_email: str, customer_name: str) -> None:
    """Tell a customer their portal account exists.  The password is never mailed."""
    if not settings.EMAIL_ENABLED:
        logger.debug("Email disabled; skipping portal access notice for %s", to_email)
        return
    await send_email(portal_access_message(to_email, customer_name))
