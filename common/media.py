# common/media.py

import logging
import re

import cloudinary.uploader

from .exceptions import ImageUploadError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 5 * 1024 * 1024
MAX_IMAGES = 10

# https://res.cloudinary.com/<cloud>/image/upload/v1712345678/realestate/projects/abc.jpg
_PUBLIC_ID = re.compile(r'/upload/(?:[^/]+/)*?(?:v\d+/)?(?P<public_id>[^.]+)(?:\.\w+)?$')


def validate_image(file):
    """Return an error message for an unacceptable upload, or None."""
    content_type = getattr(file, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        return "Only image files are allowed!"
    if file.size > MAX_IMAGE_SIZE:
        return "File too large. Maximum size is 5MB."
    return None


def upload_image(file, folder):
    """Upload one image to Cloudinary and return its secure URL."""
    try:
        upload_result = cloudinary.uploader.upload(
            file,
            folder=f"realestate/{folder}",
            resource_type="image",
            overwrite=False,
            unique_filename=True
        )
    except Exception as e:
        logger.warning(f"Cloudinary upload failed: {e}")
        raise ImageUploadError()

    image_url = upload_result.get('secure_url')
    if not image_url:
        raise ImageUploadError()
    return image_url


def upload_images(files, folder):
    urls = []
    try:
        for file in files:
            urls.append(upload_image(file, folder))
    except ImageUploadError:
        # don't leave half of a batch behind
        delete_images(urls)
        raise
    return urls


def public_id_from_url(url):
    match = _PUBLIC_ID.search(url or '')
    return match.group('public_id') if match else None


def delete_image(url):
    """Best-effort removal of a Cloudinary image; failures are only logged."""
    public_id = public_id_from_url(url)
    if not public_id:
        return False
    try:
        cloudinary.uploader.destroy(public_id, resource_type="image")
        return True
    except Exception as e:
        logger.warning(f"Could not delete image {public_id}: {e}")
        return False


def delete_images(urls):
    for url in urls or []:
        delete_image(url)
