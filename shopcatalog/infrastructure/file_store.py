"""Product image file store.

Writes uploaded product images below the static resources directory,
one folder per product:

    <static_resources_path>/mainImages/<product_id>/<file_name>
"""

import asyncio
from pathlib import Path, PurePosixPath
from typing import Protocol

import structlog

from shopcatalog.domain.exceptions import ImageStorageError

logger = structlog.get_logger()

MAIN_IMAGES_DIR = "mainImages"


class ImageStore(Protocol):
    """Storage contract for product images."""

    async def store(self, data: bytes, suggested_name: str, product_id: int) -> str:
        """Persist image bytes and return the stored file name."""
        ...

    async def discard(self, file_name: str, product_id: int) -> None:
        """Remove a stored image; a missing file is not an error."""
        ...


def clean_file_name(suggested_name: str) -> str:
    """Reduce a client-supplied file name to a bare, safe file name.

    Args:
        suggested_name: Original file name, possibly with directories.

    Returns:
        Final path component.

    Raises:
        ImageStorageError: If nothing usable remains.
    """
    name = PurePosixPath(suggested_name.replace("\\", "/")).name.strip()
    if not name or name in (".", ".."):
        raise ImageStorageError(suggested_name, "file name is empty")
    return name


class LocalImageStore:
    """Image store backed by the local filesystem.

    Repeated calls for the same product and file name overwrite the
    previous file; the target directory is created on demand.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize store.

        Args:
            root: Static resources directory.
        """
        self.root = Path(root)

    def directory_for(self, product_id: int) -> Path:
        """Get the image directory of a product."""
        return self.root / MAIN_IMAGES_DIR / str(product_id)

    async def store(self, data: bytes, suggested_name: str, product_id: int) -> str:
        """Write image bytes for a product.

        Args:
            data: Image content.
            suggested_name: Client-supplied file name.
            product_id: Owning product id.

        Returns:
            Stored file name (relative to the product directory).

        Raises:
            ImageStorageError: If the file cannot be written.
        """
        file_name = clean_file_name(suggested_name)
        target_dir = self.directory_for(product_id)

        try:
            await asyncio.to_thread(self._write, target_dir, file_name, data)
        except OSError as e:
            raise ImageStorageError(file_name, str(e)) from e

        logger.info(
            "Stored product image",
            product_id=product_id,
            file_name=file_name,
            size=len(data),
        )
        return file_name

    @staticmethod
    def _write(target_dir: Path, file_name: str, data: bytes) -> None:
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / file_name).write_bytes(data)

    async def discard(self, file_name: str, product_id: int) -> None:
        """Delete an image written for a product whose save was abandoned.

        Args:
            file_name: Stored file name as returned by store.
            product_id: Owning product id.

        Raises:
            ImageStorageError: If the file exists but cannot be removed.
        """
        path = self.directory_for(product_id) / file_name
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise ImageStorageError(file_name, str(e)) from e
        logger.info("Discarded product image", product_id=product_id, file_name=file_name)
