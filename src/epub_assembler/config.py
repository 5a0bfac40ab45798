"""
Configuration et constantes pour EPUB Assembler
"""

import os

from ebooklib.epub import NAMESPACES

# ---------- Structure de l'archive ----------
MIMETYPE = "application/epub+zip"
MIMETYPE_ENTRY = "mimetype"
CONTAINER_ENTRY = "META-INF/container.xml"
CONTENT_ROOT = "EPUB"
PACKAGE_FILE = "package.opf"
NAV_FILE = "_nav.xhtml"
SMIL_SUFFIX = ".smil"
COVER_BASENAME = "cover"

# ---------- Types de médias ----------
XHTML_MEDIA_TYPE = "application/xhtml+xml"
SMIL_MEDIA_TYPE = "application/smil+xml"
CSS_MEDIA_TYPE = "text/css"
PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"

# ---------- Espaces de noms XML ----------
OPF_NS = NAMESPACES["OPF"]
DC_NS = NAMESPACES["DC"]
OPS_NS = NAMESPACES["EPUB"]
XHTML_NS = NAMESPACES["XHTML"]
CONTAINER_NS = NAMESPACES["CONTAINERNS"]
SMIL_NS = "http://www.w3.org/ns/SMIL"
MEDIA_OVERLAY_VOCAB = "http://www.idpf.org/epub/vocab/overlays/#"

# ---------- Compression ----------
TEXT_COMPRESS_LEVEL = 9
BINARY_COMPRESS_LEVEL = 6
# Date fixe des entrées zip (sortie reproductible octet pour octet)
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)

# ---------- Langue ----------
DEFAULT_LANGUAGE = "und"
LANGUAGE_SAMPLE_SIZE = 3000
LANGUAGE_DETECT_SEED = 0

# ---------- Configuration logging ----------
LOG_DIR = "logs"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT = 5
LOG_ENCODING = "utf-8"


# ---------- Initialisation des dossiers ----------
def ensure_directories():
    """Crée les dossiers nécessaires s'ils n'existent pas."""
    os.makedirs(LOG_DIR, exist_ok=True)
