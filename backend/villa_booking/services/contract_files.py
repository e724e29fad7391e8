"""Object keys and file type checks for contract uploads."""

from __future__ import annotations

import re
import time
from pathlib import PurePath

from villa_booking.domain.errors import UnsupportedFileType

ALLOWED_CONTENT_TYPES = frozenset(
    {"application/pdf", "image/jpeg", "image/png", "image/heic", "image/heif"}
)

_EXTENSION_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

_UNSAFE_RUN = re.compile(r"[^a-z0-9.-]+")


def safe_file_name(filename: str | None) -> str:
    name = PurePath(filename or "").name.lower()
    cleaned = _UNSAFE_RUN.sub("-", name).strip("-")
    return cleaned or "contract"


def resolve_content_type(filename: str | None, content_type: str | None) -> str:
    """Return the effective content type or raise ``UnsupportedFileType``.

    A missing or generic content type is inferred from the extension.
    """
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared in ("", "application/octet-stream"):
        declared = _EXTENSION_TYPES.get(PurePath(filename or "").suffix.lower(), declared)
    if declared not in ALLOWED_CONTENT_TYPES:
        raise UnsupportedFileType(declared or "unknown")
    return declared


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def owner_contract_key(booking_id: object, filename: str | None) -> str:
    return f"{booking_id}/{_epoch_ms()}-{safe_file_name(filename)}"


def guest_signed_key(public_token: str, filename: str | None) -> str:
    return f"guest-signed/{public_token}/{_epoch_ms()}-{safe_file_name(filename)}"
