"""
Utilitaires de construction et de sérialisation XML (lxml).
"""

import copy
from typing import Iterable, List

from lxml import etree


def qualified_copy(nodes: Iterable[etree._Element], namespace: str) -> List[etree._Element]:
    """
    Copie des noeuds en plaçant les balises sans espace de noms dans `namespace`.

    Les noeuds de l'appelant ne sont jamais modifiés.
    """
    copies = []
    for node in nodes:
        node = copy.deepcopy(node)
        for el in node.iter():
            # Commentaires et instructions de traitement: tag non textuel
            if isinstance(el.tag, str) and not el.tag.startswith("{"):
                el.tag = f"{{{namespace}}}{el.tag}"
        copies.append(node)
    return copies


def to_xml_bytes(root: etree._Element) -> bytes:
    """Sérialise un document XML avec sa déclaration."""
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True)


def to_xhtml_bytes(root: etree._Element) -> bytes:
    """Sérialise un document XHTML5 (déclaration XML + doctype html)."""
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        doctype="<!DOCTYPE html>",
        pretty_print=True,
    )
