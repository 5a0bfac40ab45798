"""
Logique pour le mode ligne de commande.

Inspecte une archive EPUB produite: ordre et compression des entrées,
métadonnées relues avec ebooklib.
"""

import logging
from typing import Any, Dict, List

from .core.epub import extract_metadata, list_entries
from .core.epub.reader import ArchiveEntry

logger = logging.getLogger(__name__)


def inspect_epub(epub_path: str) -> Dict[str, Any]:
    """
    Inspecte un fichier EPUB.

    Args:
        epub_path: Chemin vers le fichier EPUB

    Returns:
        Dictionnaire {"entries": [...], "metadata": {...}}
    """
    logger.info(f"CLI mode - inspecting: {epub_path}")
    entries = list_entries(epub_path)
    metadata = extract_metadata(epub_path)
    logger.info(f"CLI mode - found {len(entries)} entries")
    return {"entries": entries, "metadata": metadata}


def _print_entries(entries: List[ArchiveEntry]):
    print(f"Entrées: {len(entries)}")
    for entry in entries:
        mode = "deflate" if entry.compressed else "stored"
        print(f"  {entry.name:<40} {mode:<8} {entry.size:>10}")


def print_archive_summary(summary: Dict[str, Any]):
    """Affiche un résumé de l'archive inspectée."""
    print("\n=== Contenu de l'archive ===")
    _print_entries(summary["entries"])

    meta = summary["metadata"]
    print("\n=== Métadonnées ===")
    if meta.get("title") is None:
        print("  Métadonnées illisibles")
        return

    print(f"  Identifiant: {meta['identifier']}")
    print(f"  Titre: {meta['title']}")
    print(f"  Auteurs: {', '.join(meta['creators'] or [])}")
    print(f"  Langues: {', '.join(meta['languages'] or [])}")

    if meta.get("publisher"):
        print(f"  Éditeur: {meta['publisher']}")
    if meta.get("subjects"):
        print(f"  Sujets: {', '.join(meta['subjects'])}")
    print(f"  Spine: {' '.join(meta['spine'] or [])}")
