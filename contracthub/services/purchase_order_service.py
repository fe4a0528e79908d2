"""
Purchase order service.

Customers upload a PO document against one of their own contracts
(ownership is checked by the caller); staff approve or reject it.
Only a pending order can be reviewed, and a review is final.

The row is flushed before the document is written, so a failed insert
leaves nothing on disk and a failed write aborts the request's
transaction.
"""

import logging
import re
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from contracthub.core.config import settings
from contracthub.core.errors import Conflict, ResourceNotFound, ValidationFailed
from contracthub.models.base import utcnow
from contracthub.models.contract import Contract
from contracthub.models.purchase_order import PurchaseOrder, PurchaseOrderStatus
from contracthub.rbac.principal import Principal
from contracthub.repositories.purchase_order_repo import PurchaseOrderRepository

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(original: str) -> str:
    name = Path(original).name
    return _UNSAFE_FILENAME_CHARS.sub("_", name) or "upload"


async def _read_limited(file: UploadFile, max_bytes: int) -> bytes:
    """Read the upload in chunks and stop as soon as it exceeds `max_bytes`."""
    chunks = []
    total = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise ValidationFailed(f"File size exceeds {max_bytes // (1024 * 1024)}MB limit")
        chunks.append(chunk)
    return b"".join(chunks)


async def _store_file(target: Path, content: bytes) -> None:
    """Write an upload to disk, removing any partial file if the write fails."""
    await aiofiles.os.makedirs(target.parent, exist_ok=True)
    try:
        async with aiofiles.open(target, "wb") as f:
            await f.write(content)
    except OSError:
        logger.exception("Failed to store upload at %s", target)
        if await aiofiles.os.path.exists(target):
            await aiofiles.os.remove(target)
        raise


async def upload_purchase_order(
    contract: Contract,
    po_number: str,
    file: UploadFile | None,
    purchase_orders: PurchaseOrderRepository,
    upload_dir: str | None = None,
) -> PurchaseOrder:
    if file is None or not file.filename:
        raise ValidationFailed("No file uploaded")

    content_type = file.content_type or ""
    if content_type not in settings.ALLOWED_UPLOAD_TYPES:
        raise ValidationFailed("Invalid file type. Only PDF, Word documents, and images are allowed.")

    content = await _read_limited(file, settings.MAX_UPLOAD_BYTES)
    if not content:
        raise ValidationFailed("Uploaded file is empty")

    stored_name = f"{utcnow():%Y%m%dT%H%M%S}-{uuid.uuid4().hex[:8]}-{_safe_filename(file.filename)}"
    target = Path(upload_dir or settings.UPLOAD_DIR) / stored_name

    purchase_order = PurchaseOrder(
        contract_id=contract.id,
        customer_id=contract.customer_id,
        po_number=po_number,
        file_name=file.filename,
        file_path=str(target),
        file_size=len(content),
        mime_type=content_type,
        status=PurchaseOrderStatus.PENDING,
    )
    purchase_order = await purchase_orders.create(purchase_order)
    await _store_file(target, content)
    logger.info(
        "Purchase order %s uploaded for contract %s (%d bytes)",
        purchase_order.id,
        contract.id,
        purchase_order.file_size,
    )
    return purchase_order


async def get_purchase_order(purchase_order_id: int, purchase_orders: PurchaseOrderRepository) -> PurchaseOrder:
    purchase_order = await purchase_orders.get_by_id(purchase_order_id)
    if purchase_order is None:
        raise ResourceNotFound("Purchase order not found")
    return purchase_order


async def review_purchase_order(
    purchase_order_id: int,
    decision: PurchaseOrderStatus,
    reviewer: Principal,
    purchase_orders: PurchaseOrderRepository,
    notes: str | None = None,
) -> PurchaseOrder:
    if decision == PurchaseOrderStatus.PENDING:
        raise ValidationFailed("A review must approve or reject")

    purchase_order = await get_purchase_order(purchase_order_id, purchase_orders)
    if purchase_order.status != PurchaseOrderStatus.PENDING:
        raise Conflict(f"Purchase order already {purchase_order.status.value}")

    purchase_order.status = decision
    purchase_order.reviewed_by_id = reviewer.id
    purchase_order.reviewed_at = utcnow()
    if notes is not None:
        purchase_order.review_notes = notes
    purchase_order = await purchase_orders.update(purchase_order)
    logger.info("Purchase order %s %s by user %s", purchase_order.id, decision.value, reviewer.id)
    return purchase_order
