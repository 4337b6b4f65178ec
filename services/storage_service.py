# Storage Service — tour image uploads to the Firebase Storage bucket
# Every file gets a fresh uuid key under TOUR_IMAGES_FOLDER, so uploads never
# overwrite each other; the returned public URL is what goes on the tour row.

import logging
import uuid
from typing import Optional

from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError

from config import TOUR_IMAGES_FOLDER
from services.query_service import RemoteError

logger = logging.getLogger(__name__)


def _extension(filename: Optional[str]) -> str:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    return "bin"


def image_key(filename: Optional[str]) -> str:
    return f"{TOUR_IMAGES_FOLDER}/{uuid.uuid4()}.{_extension(filename)}"


def upload_image(bucket, data: bytes, filename: Optional[str], content_type: Optional[str] = None) -> str:
    """Upload one image and return its public URL."""
    key = image_key(filename)
    try:
        blob = bucket.blob(key)
        blob.upload_from_string(data, content_type=content_type or "application/octet-stream")
        blob.make_public()
    except (GoogleAPIError, FirebaseError) as e:
        logger.error("upload of %s failed: %s", filename, e)
        raise RemoteError(str(e), TOUR_IMAGES_FOLDER, "upload") from e

    logger.info("uploaded %s (%d bytes)", key, len(data))
    return blob.public_url
