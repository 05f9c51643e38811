"""
Avatar upload to ImgBB.

The image is sent base64-encoded; ImgBB answers with a public URL.
"""
import base64
import logging

import requests

from jobquest.core import config
from jobquest.core.errors import ImageHostingError

logger = logging.getLogger(__name__)


def upload_image(content: bytes, name: str) -> str:
    """
    Upload raw image bytes and return the hosted image URL.

    Raises:
        ImageHostingError: with ImgBB's own message when the upload is refused
    """
    if not config.IMGBB_API_KEY:
        raise ImageHostingError("Image hosting is not configured")
    if not content:
        raise ImageHostingError("Uploaded image is empty")

    payload = {
        "image": base64.b64encode(content).decode("ascii"),
        "name": name,
    }

    try:
        response = requests.post(
            config.IMGBB_UPLOAD_URL,
            params={"key": config.IMGBB_API_KEY},
            data=payload,
            timeout=30,
        )
        body = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"ImgBB upload request failed: {e}")
        raise ImageHostingError("ImgBB upload failed") from e

    if not body.get("success"):
        message = (body.get("error") or {}).get("message") or "ImgBB upload failed"
        logger.warning(f"ImgBB rejected upload: {message}")
        raise ImageHostingError(message)

    url = body["data"]["url"]
    logger.info(f"Avatar uploaded: name={name}")
    return url
