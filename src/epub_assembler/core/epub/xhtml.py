"""
Module de rendu des pages XHTML générées.

Enveloppe les noeuds de corps fournis par l'appelant dans une page
XHTML5 complète, liée à toutes les feuilles de style du manifeste.
"""

from typing import Iterable, List

from lxml import etree

from ...config import CSS_MEDIA_TYPE, OPS_NS, XHTML_NS
from ..models import CssFile
from ..xml_utils import qualified_copy, to_xhtml_bytes


def xhtml(tag: str) -> str:
    """Nom qualifié d'une balise XHTML."""
    return f"{{{XHTML_NS}}}{tag}"


def epub_attr(name: str) -> str:
    """Nom qualifié d'un attribut epub:*."""
    return f"{{{OPS_NS}}}{name}"


def xhtml_document(title: str) -> tuple:
    """
    Crée le squelette html/head/body d'une page.

    Returns:
        Tuple (html, head, body)
    """
    html = etree.Element(xhtml("html"), nsmap={None: XHTML_NS, "epub": OPS_NS})
    head = etree.SubElement(html, xhtml("head"))
    etree.SubElement(head, xhtml("title")).text = title
    body = etree.SubElement(html, xhtml("body"))
    return html, head, body


def render_content_page(
    title: str, body_nodes: Iterable[etree._Element], css_files: List[CssFile]
) -> bytes:
    """
    Génère une page XHTML à partir de noeuds de corps.

    Args:
        title: Titre de la page (<title>)
        body_nodes: Noeuds placés dans <body>
        css_files: Feuilles de style liées dans <head>

    Returns:
        Octets du document XHTML
    """
    html, head, body = xhtml_document(title)
    for css in css_files:
        etree.SubElement(
            head, xhtml("link"), href=css.file_name, type=CSS_MEDIA_TYPE, rel="stylesheet"
        )
    body.extend(qualified_copy(body_nodes, XHTML_NS))
    return to_xhtml_bytes(html)
