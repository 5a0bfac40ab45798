"""
Module EPUB - Assemblage d'archives EPUB 3.

Ce module fournit l'écriture d'un EPUB à partir d'une description
déclarative du livre, ainsi que la relecture des archives produites.
"""

# Exports publics
from .cover import cover_from_bytes, cover_from_path
from .reader import extract_metadata, list_entries, safe_read_epub
from .references import resolve_references
from .smil import format_clock_value
from .validation import validate_manifest
from .writer import write_epub, write_epub_file

__all__ = [
    "cover_from_bytes",
    "cover_from_path",
    "extract_metadata",
    "format_clock_value",
    "list_entries",
    "resolve_references",
    "safe_read_epub",
    "validate_manifest",
    "write_epub",
    "write_epub_file",
]
