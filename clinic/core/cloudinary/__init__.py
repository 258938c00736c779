"""
Cloudinary file storage for profile photos and clinical attachments.
"""
import re
import logging
from typing import Iterable, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.exceptions
from fastapi import UploadFile

from ...config import settings
from ...exceptions import InvalidUploadException

# Set up logger for this module
logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.cloudinary_cloud_name,
    api_key=settings.cloudinary_api_key,
    api_secret=settings.cloudinary_api_secret,
    secure=True,
)

PATIENTS_FOLDER = "san_rafael/pacientes"
DOCTORS_FOLDER = "san_rafael/doctores"
MEDICAL_RECORDS_FOLDER = "san_rafael/historias_clinicas"

IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
DOCUMENT_TYPES = IMAGE_TYPES + (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

VERSION_SEGMENT = re.compile(r"^v\d+/")


def validate_upload(file: UploadFile, allowed_types: Iterable[str] = IMAGE_TYPES, max_bytes: Optional[int] = None) -> None:
    """
    Reject files with a forbidden content type or above the size limit.

    Raises:
        InvalidUploadException: If the file is not acceptable
    """
    max_bytes = max_bytes or settings.upload_max_bytes
    if file.content_type not in allowed_types:
        raise InvalidUploadException(f"Tipo de archivo no permitido: {file.content_type}")
    if file.size is not None and file.size > max_bytes:
        raise InvalidUploadException(f"El archivo excede el tamaño máximo de {max_bytes // (1024 * 1024)}MB")


def upload_file(file: UploadFile, folder: str) -> Optional[str]:
    """
    Uploads a file to Cloudinary and returns its secure URL.
    Returns None if the upload fails.
    """
    try:
        result = cloudinary.uploader.upload(
            file.file,
            folder=folder,
            resource_type="auto",
        )
        secure_url = result.get("secure_url")
        if not secure_url:
            logger.error("Cloudinary upload result did not contain a secure_url.")
            return None
        logger.info(f"Uploaded {file.filename} to Cloudinary folder {folder}: {secure_url}")
        return secure_url
    except cloudinary.exceptions.Error as e:
        logger.error(f"Cloudinary API error during upload of {file.filename}: {str(e)}")
        return None
    except Exception as e:
        logger.error(f"Unexpected error during upload of {file.filename} to Cloudinary: {str(e)}")
        return None


def extract_public_id(url: Optional[str]) -> Optional[str]:
    """
    Derive the Cloudinary public id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1712/san_rafael/doctores/abc.png``
    gives ``san_rafael/doctores/abc``.
    """
    if not url or "/upload/" not in url:
        return None
    path = url.split("/upload/", 1)[1].split("?", 1)[0]
    path = VERSION_SEGMENT.sub("", path)
    if "." in path.rsplit("/", 1)[-1]:
        path = path.rsplit(".", 1)[0]
    return path or None


def delete_file(url: Optional[str]) -> bool:
    """
    Best-effort removal of a stored file; failures are logged.

    Returns:
        bool: True if Cloudinary reported the file as deleted
    """
    public_id = extract_public_id(url)
    if not public_id:
        return False
    resource_type = "raw" if "/raw/upload/" in url else "image"
    try:
        result = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
        deleted = result.get("result") == "ok"
        if not deleted:
            logger.warning(f"Cloudinary did not delete {public_id}: {result}")
        return deleted
    except Exception as e:
        logger.error(f"Error deleting {public_id} from Cloudinary: {str(e)}")
        return False
