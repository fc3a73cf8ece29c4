"""Receipt blob storage: naming, upload and public URL resolution."""

from __future__ import annotations

import time
import uuid
from pathlib import Path
from typing import Protocol, runtime_checkable

from cashbook.config import get_settings
from cashbook.exceptions import StorageError


def build_receipt_name(filename: str, prefix: str = "") -> str:
    """Return a collision-free object name for an uploaded receipt.

    The name is ``{prefix or epoch millis}_{uuid4}.{ext}`` where ``ext`` is the
    text after the last dot of the original filename.
    """
    ext = filename.rsplit(".", 1)[-1]
    head = prefix or str(int(time.time() * 1000))
    return f"{head}_{uuid.uuid4()}.{ext}"


@runtime_checkable
class BlobStore(Protocol):
    """Interface for the receipt blob store."""

    async def upload(self, name: str, content: bytes, content_type: str | None = None) -> str:
        """Store ``content`` under ``name`` and return its public URL.

        Raises StorageError if the name already exists or the write fails.
        """
        ...


def _public_url(name: str) -> str:
    settings = get_settings()
    return f"{settings.public_storage_url.rstrip('/')}/{settings.receipts_bucket}/{name}"


class InMemoryBlobStore:
    """In-memory implementation for development and tests."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str | None]] = {}

    async def upload(self, name: str, content: bytes, content_type: str | None = None) -> str:
        """Store ``content`` under ``name`` and return its public URL."""
        if name in self.objects:
            raise StorageError(f"The resource already exists: {name}")
        self.objects[name] = (content, content_type)
        return _public_url(name)


class LocalBlobStore:
    """Stores receipts as files in a local directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    async def upload(self, name: str, content: bytes, content_type: str | None = None) -> str:
        """Store ``content`` under ``name`` and return its public URL."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with (self.root / name).open("xb") as fh:
                fh.write(content)
        except FileExistsError:
            raise StorageError(f"The resource already exists: {name}") from None
        except OSError as exc:
            raise StorageError(f"Receipt upload failed: {exc.strerror or exc}") from exc
        return _public_url(name)


def _default_blob_store() -> BlobStore:
    receipts_dir = get_settings().receipts_dir
    if receipts_dir:
        return LocalBlobStore(receipts_dir)
    return InMemoryBlobStore()


_blob_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """FastAPI dependency for the receipt blob store."""
    global _blob_store
    if _blob_store is None:
        _blob_store = _default_blob_store()
    return _blob_store


def set_blob_store(store: BlobStore) -> None:
    """Override the store (for testing or production wiring)."""
    global _blob_store
    _blob_store = store
