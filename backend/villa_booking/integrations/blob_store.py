"""File-system backed blob store for contract files.

Mirrors the small surface the booking flow needs from an object store:
upload, public URLs for open buckets and short-lived signed URLs for private
ones. Signed URLs carry a JWT naming the bucket, key and expiry.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from urllib.parse import quote

from jose import JWTError, jwt

_SIGNED_URL_PURPOSE = "blob-download"
_META_SUFFIX = ".meta.json"


class BlobStoreError(RuntimeError):
    """Raised when storage operations fail."""


@dataclass
class StoredBlob:
    """Metadata for an object stored via the helper."""

    bucket: str
    key: str
    path: Path
    size: int
    content_type: str


class BlobStore:
    """One bucket on the local file system."""

    def __init__(
        self,
        bucket: str,
        *,
        root: Path | None = None,
        public: bool = False,
        base_url: str | None = None,
        signing_key: str,
        algorithm: str = "HS256",
    ) -> None:
        if not bucket:
            raise BlobStoreError("Storage bucket is not configured")
        self.bucket = bucket
        self.public = public
        self._base_url = base_url.rstrip("/") if base_url else ""
        self._root = (root or Path.cwd() / ".storage") / bucket
        self._signing_key = signing_key
        self._algorithm = algorithm

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _normalise_key(self, key: str) -> str:
        normalised = key.lstrip("/")
        if (
            not normalised
            or ".." in normalised.split("/")
            or normalised.endswith(_META_SUFFIX)
        ):
            raise BlobStoreError("Storage object key is invalid")
        return normalised

    def _path_for(self, key: str) -> Path:
        return self._root / self._normalise_key(key)

    def _meta_path_for(self, key: str) -> Path:
        path = self._path_for(key)
        return path.with_name(path.name + _META_SUFFIX)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def upload(self, key: str, data: bytes, *, content_type: str) -> StoredBlob:
        """Write an object, replacing any previous one under the same key."""
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            self._meta_path_for(key).write_text(
                json.dumps({"content_type": content_type}), encoding="utf-8"
            )
        except OSError as exc:
            raise BlobStoreError(f"Could not store {key}: {exc}") from exc
        return StoredBlob(
            bucket=self.bucket,
            key=self._normalise_key(key),
            path=path,
            size=len(data),
            content_type=content_type,
        )

    def read(self, key: str) -> bytes:
        try:
            return self._path_for(key).read_bytes()
        except FileNotFoundError as exc:
            raise BlobStoreError(f"Object {key} not found") from exc

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def metadata(self, key: str) -> StoredBlob | None:
        """Return what was recorded at upload time, if the object exists."""
        path = self._path_for(key)
        meta_path = self._meta_path_for(key)
        if not path.is_file() or not meta_path.is_file():
            return None
        try:
            recorded = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise BlobStoreError(f"Metadata for {key} is unreadable") from exc
        return StoredBlob(
            bucket=self.bucket,
            key=self._normalise_key(key),
            path=path,
            size=path.stat().st_size,
            content_type=str(recorded.get("content_type") or "application/octet-stream"),
        )

    def public_url(self, key: str) -> str:
        if not self.public:
            raise BlobStoreError(f"Bucket {self.bucket} is not public")
        normalised = quote(self._normalise_key(key))
        return f"{self._base_url}/{self.bucket}/{normalised}"

    def create_signed_url(self, key: str, ttl_seconds: int) -> str:
        """Return a download URL valid for ``ttl_seconds``."""
        normalised = self._normalise_key(key)
        if not self.exists(normalised):
            raise BlobStoreError(f"Object {key} not found")
        expires = datetime.now(UTC) + timedelta(seconds=ttl_seconds)
        token = jwt.encode(
            {
                "bucket": self.bucket,
                "key": normalised,
                "purpose": _SIGNED_URL_PURPOSE,
                "exp": expires,
            },
            self._signing_key,
            algorithm=self._algorithm,
        )
        return f"{self._base_url}/signed/{token}"

    def resolve_signed_token(self, token: str) -> str:
        """Return the object key a signed token grants, or raise."""
        try:
            claims: dict[str, Any] = jwt.decode(
                token, self._signing_key, algorithms=[self._algorithm]
            )
        except JWTError as exc:
            raise BlobStoreError("Signed URL is invalid or expired") from exc
        if claims.get("purpose") != _SIGNED_URL_PURPOSE or claims.get("bucket") != self.bucket:
            raise BlobStoreError("Signed URL is not valid for this bucket")
        return self._normalise_key(str(claims.get("key", "")))


def build_blob_store(bucket: str, **overrides: Any) -> BlobStore:
    """Factory that honours application settings."""

    from villa_booking.core.config import get_settings

    settings = get_settings()
    base_url = overrides.get("base_url") or settings.storage_public_base_url
    if not base_url:
        base_url = f"{settings.api_v1_prefix}/storage"
    return BlobStore(
        bucket,
        root=overrides.get("root") or settings.storage_root,
        public=overrides.get("public", bucket == settings.contracts_bucket),
        base_url=base_url,
        signing_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
