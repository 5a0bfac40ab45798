"""
Point d'entrée principal pour EPUB Assembler
"""

import logging
import os
import sys
import zipfile
from logging.handlers import RotatingFileHandler

from .config import (
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_ENCODING,
    LOG_MAX_BYTES,
    ensure_directories,
)


def setup_logging():
    """Configure le système de logging."""
    ensure_directories()
    logger = logging.getLogger("epub_assembler")
    logger.setLevel(logging.DEBUG)

    # Handler pour fichier avec rotation
    logfile = os.path.join(LOG_DIR, "epub_assembler.log")
    handler = RotatingFileHandler(
        logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding=LOG_ENCODING
    )
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Handler pour console
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    return logger


def run_cli(argv=None) -> int:
    """Lance le mode ligne de commande."""
    logger = logging.getLogger("epub_assembler")
    argv = sys.argv if argv is None else argv

    if len(argv) < 2:
        print("Usage: python -m epub_assembler <file.epub>")
        print("  file.epub: Archive EPUB à inspecter")
        return 1

    epub_path = argv[1]
    if not os.path.isfile(epub_path):
        print(f"Error: {epub_path} is not a file")
        return 1

    try:
        from .cli import inspect_epub, print_archive_summary

        print_archive_summary(inspect_epub(epub_path))
        return 0
    except zipfile.BadZipFile as e:
        logger.error("Not a zip archive: %s", epub_path)
        print(f"Error: {e}")
        return 1


def main() -> int:
    """Point d'entrée principal."""
    setup_logging()
    return run_cli()


if __name__ == "__main__":
    raise SystemExit(main())
