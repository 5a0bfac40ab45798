"""
Module de préparation de la couverture.

Identifie le format d'une image avec Pillow pour construire un CoverImage
avec le bon type de média et la bonne extension.
"""

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import ValidationError
from ..models import CoverImage

logger = logging.getLogger(__name__)

# Formats Pillow acceptés comme couverture EPUB 3 (types de médias de base)
COVER_FORMATS = {
    "JPEG": ("image/jpeg", ".jpg"),
    "PNG": ("image/png", ".png"),
    "GIF": ("image/gif", ".gif"),
    "WEBP": ("image/webp", ".webp"),
}


def identify_cover_format(data: bytes) -> tuple:
    """
    Identifie le type de média et l'extension d'une image.

    Args:
        data: Octets de l'image

    Returns:
        Tuple (media_type, extension)

    Raises:
        ValidationError: Si l'image est illisible ou d'un format non supporté
    """
    try:
        with Image.open(BytesIO(data)) as img:
            fmt = img.format
    except UnidentifiedImageError as e:
        raise ValidationError([f"cover image is not a readable image: {e}"]) from e

    if fmt not in COVER_FORMATS:
        raise ValidationError([f"unsupported cover image format: {fmt}"])
    return COVER_FORMATS[fmt]


def cover_from_bytes(data: bytes) -> CoverImage:
    """Construit un CoverImage à partir des octets d'une image."""
    media_type, extension = identify_cover_format(data)
    logger.info("Cover identified as %s", media_type)
    return CoverImage(stream=BytesIO(data), media_type=media_type, extension=extension)


def cover_from_path(path: str) -> CoverImage:
    """Construit un CoverImage à partir d'un fichier image."""
    return cover_from_bytes(Path(path).read_bytes())
