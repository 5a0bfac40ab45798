"""
Module de lecture EPUB.

Responsabilité unique: relire une archive produite (ordre et compression
des entrées, métadonnées) pour l'inspection.
"""

import logging
import zipfile
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ebooklib import epub
from ebooklib.epub import EpubBook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveEntry:
    """Entrée d'une archive, dans l'ordre de l'archive."""

    name: str
    compressed: bool
    size: int


def list_entries(epub_path: str) -> List[ArchiveEntry]:
    """
    Liste les entrées de l'archive dans leur ordre d'écriture.

    Raises:
        zipfile.BadZipFile: Si le fichier n'est pas une archive zip
    """
    with zipfile.ZipFile(epub_path) as zf:
        return [
            ArchiveEntry(
                name=info.filename,
                compressed=info.compress_type != zipfile.ZIP_STORED,
                size=info.file_size,
            )
            for info in zf.infolist()
        ]


def safe_read_epub(epub_path: str) -> Optional[EpubBook]:
    """
    Lit un fichier EPUB de manière sécurisée.

    Args:
        epub_path: Chemin vers le fichier EPUB

    Returns:
        Objet EpubBook si succès, None sinon
    """
    try:
        return epub.read_epub(epub_path, options={"ignore_ncx": True})
    except Exception as e:
        logger.exception("ebooklib failed to read %s: %s", epub_path, e)
        return None


# --- Extracteurs de métadonnées ---


def _get_values(book: EpubBook, name: str) -> List[str]:
    """Valeurs d'un champ Dublin Core, dans l'ordre du document."""
    return [value for value, _ in book.get_metadata("DC", name) if value]


def _get_first(book: EpubBook, name: str) -> Optional[str]:
    values = _get_values(book, name)
    return values[0] if values else None


def _get_spine(book: EpubBook) -> List[str]:
    return [entry[0] if isinstance(entry, tuple) else str(entry) for entry in book.spine]


def extract_metadata(epub_path: str) -> Dict[str, Any]:
    """
    Extrait les métadonnées d'un fichier EPUB.

    Args:
        epub_path: Chemin vers le fichier EPUB

    Returns:
        Dictionnaire avec les clés: title, creators, languages, identifier,
        publisher, description, subjects, spine. Toutes les valeurs sont
        None si le fichier est illisible.
    """
    data: Dict[str, Any] = {
        k: None
        for k in [
            "title",
            "creators",
            "languages",
            "identifier",
            "publisher",
            "description",
            "subjects",
            "spine",
        ]
    }

    book = safe_read_epub(epub_path)
    if not book:
        logger.warning("Could not read EPUB file: %s", epub_path)
        return data

    data["title"] = _get_first(book, "title")
    data["creators"] = _get_values(book, "creator")
    data["languages"] = _get_values(book, "language")
    data["identifier"] = _get_first(book, "identifier")
    data["publisher"] = _get_first(book, "publisher")
    data["description"] = _get_first(book, "description")
    data["subjects"] = _get_values(book, "subject")
    data["spine"] = _get_spine(book)

    logger.info("Extracted metadata for %s", epub_path)
    return data
