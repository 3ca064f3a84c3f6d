# app/services/storage_service.py
# Profile photo bucket on local disk, served under /static

from fastapi import HTTPException, status, UploadFile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
import aiofiles
import logging
import os
import time

from app.core.config import settings

logger = logging.getLogger(__name__)

# --- Storage layout ---
BASE_DIR = Path(__file__).resolve().parent.parent.parent
STORAGE_ROOT = Path(settings.STORAGE_DIR)
if not STORAGE_ROOT.is_absolute():
    STORAGE_ROOT = BASE_DIR / STORAGE_ROOT
STATIC_URL_PREFIX = "/static"
os.makedirs(STORAGE_ROOT / settings.PROFILE_PHOTO_BUCKET, exist_ok=True)
# --- end ---


def storage_key_from_url(url: str) -> Optional[str]:
    """
    Object key from a public URL: its last two path segments
    ("{profile_id}/{file name}")
    """
    segments = [s for s in urlparse(url).path.split("/") if s]
    if len(segments) < 2:
        return None
    owner, filename = segments[-2], segments[-1]
    if ".." in (owner, filename):
        return None
    return f"{owner}/{filename}"


class StorageService:
    def __init__(
        self,
        root: Path = STORAGE_ROOT,
        bucket: str = settings.PROFILE_PHOTO_BUCKET,
        public_base_url: str = settings.PUBLIC_BASE_URL,
    ):
        self.root = Path(root)
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def bucket_url(self) -> str:
        return f"{self.public_base_url}{STATIC_URL_PREFIX}/{self.bucket}/"

    def public_url(self, key: str) -> str:
        return f"{self.bucket_url}{key}"

    def is_stored_url(self, url: Optional[str]) -> bool:
        """Does url point into this bucket (vs. an identity-provider avatar)?"""
        return bool(url) and url.startswith(self.bucket_url)

    async def upload_profile_photo(self, profile_id: str, file: UploadFile) -> str:
        """Save the upload and return its public URL"""
        if not (file.content_type or "").startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Profile photos must be images"
            )

        extension = Path(file.filename or "").suffix.lstrip(".").lower() or "jpg"
        key = f"{profile_id}/{int(time.time() * 1000)}.{extension}"
        file_path = self.root / self.bucket / key
        os.makedirs(file_path.parent, exist_ok=True)

        try:
            async with aiofiles.open(file_path, 'wb') as f:
                content = await file.read()
                await f.write(content)
        except OSError as e:
            logger.error(f"Saving profile photo failed: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not store the photo"
            )

        logger.info(f"Stored profile photo {key}")
        return self.public_url(key)

    def delete_profile_photo(self, photo_url: str) -> bool:
        """Remove the object behind photo_url; False if nothing was there"""
        key = storage_key_from_url(photo_url)
        if key is None:
            return False
        file_path = self.root / self.bucket / key
        if not file_path.is_file():
            return False
        os.remove(file_path)
        logger.info(f"Deleted profile photo {key}")
        return True
