"""
Module de résolution des identifiants.

Responsabilité unique: attribuer à chaque entrée du manifeste un id et un
href stables, partagés par le package, la navigation et les SMIL.

Les ids ne dépendent que de la position dans les listes du manifeste
(index à partir de 1):
    title, title_smil, nav, cover-img, item{i}, item{i}_smil,
    other{i}, css{i}
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ...config import (
    COVER_BASENAME,
    CSS_MEDIA_TYPE,
    NAV_FILE,
    SMIL_MEDIA_TYPE,
    SMIL_SUFFIX,
    XHTML_MEDIA_TYPE,
)
from ..models import ContentFile, Manifest

logger = logging.getLogger(__name__)

TITLE_ID = "title"
NAV_ID = "nav"
COVER_ID = "cover-img"


@dataclass(frozen=True)
class ItemRef:
    """Entrée résolue du manifeste OPF."""

    id: str
    href: str
    media_type: str
    properties: str | None = None
    media_overlay: str | None = None


@dataclass(frozen=True)
class DocumentRef:
    """Fichier de contenu avec son item et, le cas échéant, son SMIL."""

    file: ContentFile
    item: ItemRef
    smil: ItemRef | None = None


@dataclass(frozen=True)
class ReferenceTable:
    """Table des références, calculée une fois par écriture."""

    title: DocumentRef
    nav: ItemRef
    cover: ItemRef | None
    contents: Tuple[DocumentRef, ...]
    others: Tuple[ItemRef, ...]
    css: Tuple[ItemRef, ...]

    def documents(self) -> Tuple[DocumentRef, ...]:
        """Page de titre puis fichiers de contenu, dans l'ordre d'écriture."""
        return (self.title,) + self.contents

    def smil_items(self) -> List[ItemRef]:
        return [doc.smil for doc in self.documents() if doc.smil is not None]

    def manifest_items(self) -> List[ItemRef]:
        """Items dans l'ordre du <manifest>."""
        items = [self.title.item, self.nav]
        if self.cover is not None:
            items.append(self.cover)
        items.extend(doc.item for doc in self.contents)
        items.extend(self.smil_items())
        items.extend(self.others)
        items.extend(self.css)
        return items


def _document_ref(content_file: ContentFile, item_id: str) -> DocumentRef:
    smil = None
    if content_file.smil is not None:
        smil = ItemRef(
            id=f"{item_id}_smil",
            href=content_file.file_name + SMIL_SUFFIX,
            media_type=SMIL_MEDIA_TYPE,
        )
    item = ItemRef(
        id=item_id,
        href=content_file.file_name,
        media_type=XHTML_MEDIA_TYPE,
        media_overlay=smil.id if smil else None,
    )
    return DocumentRef(file=content_file, item=item, smil=smil)


def resolve_references(manifest: Manifest) -> ReferenceTable:
    """
    Calcule la table des ids/hrefs d'un manifeste.

    Fonction pure: deux manifestes identiques donnent la même table.

    Args:
        manifest: Manifeste du livre

    Returns:
        ReferenceTable immuable
    """
    cover = None
    if manifest.cover_image is not None:
        cover = ItemRef(
            id=COVER_ID,
            href=COVER_BASENAME + manifest.cover_image.extension,
            media_type=manifest.cover_image.media_type,
            properties="cover-image",
        )

    table = ReferenceTable(
        title=_document_ref(manifest.title_page, TITLE_ID),
        nav=ItemRef(id=NAV_ID, href=NAV_FILE, media_type=XHTML_MEDIA_TYPE, properties="nav"),
        cover=cover,
        contents=tuple(
            _document_ref(f, f"item{i}") for i, f in enumerate(manifest.content_files, start=1)
        ),
        others=tuple(
            ItemRef(id=f"other{i}", href=f.file_name, media_type=f.media_type)
            for i, f in enumerate(manifest.other_files, start=1)
        ),
        css=tuple(
            ItemRef(id=f"css{i}", href=f.file_name, media_type=CSS_MEDIA_TYPE)
            for i, f in enumerate(manifest.css_files, start=1)
        ),
    )
    logger.debug("Resolved %d manifest items", len(table.manifest_items()))
    return table
