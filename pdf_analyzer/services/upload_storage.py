"""Staging of uploaded files on disk for the duration of a request."""

from pathlib import Path

from fastapi import UploadFile

from ..utils import timestamped_filename
import logging

logger = logging.getLogger(__name__)


async def save_upload(upload: UploadFile, content: bytes, upload_dir: str) -> Path:
    """Write already-read upload content into the upload directory under a timestamped name."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    destination = directory / timestamped_filename(upload.filename or "")
    try:
        destination.write_bytes(content)
    except BaseException:
        if destination.exists():
            remove_upload(destination)
        raise

    logger.info(f"Staged upload {upload.filename} at {destination}")
    return destination.resolve()


def remove_upload(path: Path) -> None:
    """Delete a staged upload."""
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning(f"Staged upload {path} was already removed")
        return
    logger.info(f"Removed staged upload {path}")
