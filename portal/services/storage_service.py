"""
Storage Service - uploads to Cloudinary.

Credentials come from Settings; when they are missing every upload
fails with 500 "Cloud storage not configured".
"""

import logging
from typing import Optional

import cloudinary
import cloudinary.uploader
from fastapi import HTTPException

from portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Sub-folder per upload kind
FOLDERS = {
    "profile-picture": "profile-pictures",
    "resume": "resumes",
    "verification": "verifications",
}


class StorageService:
    def __init__(self):
        self.settings = get_settings()
        if self.settings.storage_configured:
            cloudinary.config(
                cloud_name=self.settings.cloudinary_cloud_name,
                api_key=self.settings.cloudinary_api_key,
                api_secret=self.settings.cloudinary_api_secret,
                secure=True,
            )

    def upload(self, content: bytes, kind: str, owner_id: str, resource_type: str = "auto",
               filename: Optional[str] = None) -> dict:
        """
        Store `content` and return {"url", "public_id", "bytes"}.
        """
        if not self.settings.storage_configured:
            raise HTTPException(status_code=500, detail="Cloud storage not configured")

        folder = f"{self.settings.cloudinary_folder}/{FOLDERS[kind]}"
        result = cloudinary.uploader.upload(
            content,
            folder=folder,
            public_id=f"{owner_id}-{kind}" if kind == "profile-picture" else None,
            overwrite=kind == "profile-picture",
            resource_type=resource_type,
            filename=filename,
            use_filename=bool(filename),
            unique_filename=True,
        )
        logger.info("Uploaded %s for %s to %s", kind, owner_id, result.get("public_id"))
        return {
            "url": result["secure_url"],
            "public_id": result.get("public_id"),
            "bytes": result.get("bytes", len(content)),
        }
