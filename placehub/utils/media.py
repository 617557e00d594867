import logging
import os
from typing import Annotated, Protocol

import cloudinary
import cloudinary.uploader
from dotenv import load_dotenv
from fastapi import Depends

load_dotenv()

logger = logging.getLogger(__name__)

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")


class MediaDeletionError(Exception):
    pass


class MediaHost(Protocol):
    def destroy(self, public_id: str) -> None: ...


def public_id_from_url(photo_url: str) -> str:
    """
    Media identifier for a stored photo URL: the last path segment with
    everything from its first dot removed.

    https://res.cloudinary.com/demo/image/upload/v1/abc123.jpg -> abc123
    """
    return photo_url.rstrip("/").split("/")[-1].split(".")[0]


class CloudinaryMediaHost:
    def __init__(self, cloud_name=None, api_key=None, api_secret=None):
        cloudinary.config(
            cloud_name=cloud_name or CLOUDINARY_CLOUD_NAME,
            api_key=api_key or CLOUDINARY_API_KEY,
            api_secret=api_secret or CLOUDINARY_API_SECRET,
            secure=True,
        )

    def destroy(self, public_id: str) -> None:
        response = cloudinary.uploader.destroy(public_id)
        result = (response or {}).get("result")
        # "not found" means there is nothing left to clean up
        if result not in ("ok", "not found"):
            raise MediaDeletionError(f"Cloudinary refused to delete {public_id}: {result}")
        logger.debug(f"Cloudinary destroy {public_id}: {result}")


_media_host = None


# Dependency
def get_media_host() -> MediaHost:
    global _media_host
    if _media_host is None:
        _media_host = CloudinaryMediaHost()
    return _media_host


media_dependency = Annotated[MediaHost, Depends(get_media_host)]
