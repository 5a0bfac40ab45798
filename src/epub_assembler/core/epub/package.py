"""
Module de génération du document de package (OPF 3.0).

Responsabilité unique: construire package.opf (metadata, manifest, spine)
à partir des métadonnées et de la table des références.
"""

import logging
from datetime import datetime, timezone

from lxml import etree

from ...config import DC_NS, MEDIA_OVERLAY_VOCAB, OPF_NS
from ..models import Metadata, Navigation
from ..xml_utils import to_xml_bytes
from .references import ItemRef, ReferenceTable
from .smil import format_clock_value

logger = logging.getLogger(__name__)

UNIQUE_IDENTIFIER_ID = "id"
MODIFIED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _opf(tag: str) -> str:
    return f"{{{OPF_NS}}}{tag}"


def _dc(tag: str) -> str:
    return f"{{{DC_NS}}}{tag}"


def format_modified(value: datetime) -> str:
    """Formate dcterms:modified en UTC, à la seconde, suffixe Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(MODIFIED_FORMAT)


def _text(parent: etree._Element, tag: str, text: str, **attrs) -> etree._Element:
    el = etree.SubElement(parent, tag)
    for name, value in attrs.items():
        el.set(name, value)
    el.text = text
    return el


def _meta(parent: etree._Element, prop: str, text: str, refines: str | None = None):
    el = etree.SubElement(parent, _opf("meta"), property=prop)
    if refines:
        el.set("refines", refines)
    el.text = text
    return el


def _build_metadata(package: etree._Element, metadata: Metadata, refs: ReferenceTable):
    md = etree.SubElement(package, _opf("metadata"))

    _text(md, _dc("identifier"), metadata.identifier, id=UNIQUE_IDENTIFIER_ID)
    _text(md, _dc("title"), metadata.title)
    for i, creator in enumerate(metadata.creators, start=1):
        _text(md, _dc("creator"), creator, id=f"creator{i}")
    for language in metadata.languages:
        _text(md, _dc("language"), language)

    if metadata.modified_at is None:
        raise ValueError("modified_at must be set before building the package document")
    _meta(md, "dcterms:modified", format_modified(metadata.modified_at))

    if metadata.source:
        _text(md, _dc("source"), metadata.source)
    if metadata.description:
        _text(md, _dc("description"), metadata.description)
    if metadata.publisher:
        _text(md, _dc("publisher"), metadata.publisher)
    for subject in metadata.subjects:
        _text(md, _dc("subject"), subject)
    if metadata.rights:
        _text(md, _dc("rights"), metadata.rights)

    overlay = metadata.media_overlay
    if overlay is None:
        return

    _meta(md, "media:duration", format_clock_value(overlay.total_duration))
    # Même id que l'attribut media-overlay du manifeste
    for doc in refs.documents():
        if doc.smil is not None:
            _meta(
                md,
                "media:duration",
                format_clock_value(doc.file.smil.duration),
                refines=f"#{doc.smil.id}",
            )
    if overlay.active_class:
        _meta(md, "media:active-class", overlay.active_class)
    if overlay.playback_active_class:
        _meta(md, "media:playback-active-class", overlay.playback_active_class)
    for narrator in overlay.narrators:
        _meta(md, "media:narrator", narrator)


def _manifest_item(parent: etree._Element, ref: ItemRef):
    item = etree.SubElement(parent, _opf("item"), href=ref.href, id=ref.id)
    if ref.properties:
        item.set("properties", ref.properties)
    item.set("media-type", ref.media_type)
    if ref.media_overlay:
        item.set("media-overlay", ref.media_overlay)


def _itemref(parent: etree._Element, idref: str, linear: bool):
    etree.SubElement(parent, _opf("itemref"), idref=idref, linear="yes" if linear else "no")


def build_package_document(metadata: Metadata, refs: ReferenceTable) -> bytes:
    """
    Construit le document OPF.

    Args:
        metadata: Métadonnées, valeurs par défaut déjà appliquées
        refs: Table des références résolues

    Returns:
        Octets de package.opf
    """
    package = etree.Element(
        _opf("package"),
        nsmap={None: OPF_NS, "dc": DC_NS},
    )
    package.set("prefix", f"media: {MEDIA_OVERLAY_VOCAB}")
    package.set("version", "3.0")
    package.set("unique-identifier", UNIQUE_IDENTIFIER_ID)

    _build_metadata(package, metadata, refs)

    manifest = etree.SubElement(package, _opf("manifest"))
    for ref in refs.manifest_items():
        _manifest_item(manifest, ref)

    spine = etree.SubElement(package, _opf("spine"))
    _itemref(spine, refs.title.item.id, True)
    _itemref(spine, refs.nav.id, True)
    for doc in refs.contents:
        _itemref(spine, doc.item.id, doc.file.navigation is Navigation.LINEAR)

    logger.debug("Built package document for %s", metadata.identifier)
    return to_xml_bytes(package)
