"""
Module de génération du document de navigation.

Produit _nav.xhtml: table des matières (toc) et repères (landmarks).
"""

import logging

from lxml import etree

from ...config import NAV_FILE
from ..xml_utils import to_xhtml_bytes
from .references import ReferenceTable
from .xhtml import epub_attr, xhtml, xhtml_document

logger = logging.getLogger(__name__)

TOC_TITLE = "Table of Contents"
LANDMARKS_TITLE = "Landmarks"
START_TITLE = "Start of Content"


def _anchor(parent: etree._Element, href: str, text: str, epub_type: str | None = None):
    li = etree.SubElement(parent, xhtml("li"))
    a = etree.SubElement(li, xhtml("a"))
    if epub_type:
        a.set(epub_attr("type"), epub_type)
    a.set("href", href)
    a.text = text


def build_navigation_document(refs: ReferenceTable) -> bytes:
    """
    Génère le document de navigation.

    Seuls les fichiers de contenu ayant un rôle de navigation apparaissent
    dans la table des matières. Le repère "Start of Content" pointe vers le
    premier d'entre eux, ou vers la page de titre s'il n'y en a aucun.

    Args:
        refs: Table des références résolues

    Returns:
        Octets du document XHTML
    """
    navigable = [doc for doc in refs.contents if doc.file.navigation is not None]
    start_href = navigable[0].item.href if navigable else refs.title.item.href

    html, _, body = xhtml_document(TOC_TITLE)

    toc = etree.SubElement(body, xhtml("nav"))
    toc.set("role", "doc-toc")
    toc.set(epub_attr("type"), "toc")
    toc.set("id", "toc")
    etree.SubElement(toc, xhtml("h2")).text = TOC_TITLE
    toc_list = etree.SubElement(toc, xhtml("ol"))
    for doc in navigable:
        _anchor(toc_list, doc.item.href, doc.file.title)

    landmarks = etree.SubElement(body, xhtml("nav"))
    landmarks.set(epub_attr("type"), "landmarks")
    landmarks.set("hidden", "")
    etree.SubElement(landmarks, xhtml("h2")).text = LANDMARKS_TITLE
    landmark_list = etree.SubElement(landmarks, xhtml("ol"))
    _anchor(landmark_list, f"{NAV_FILE}#toc", TOC_TITLE, epub_type="toc")
    _anchor(landmark_list, start_href, START_TITLE, epub_type="bodymatter")

    logger.debug("Generated navigation with %d toc entries", len(navigable))
    return to_xhtml_bytes(html)
