"""
Validation du manifeste avant écriture.

Détecte les violations du contrat de l'appelant qui produiraient une
archive structurellement valide mais sémantiquement fausse.
"""

import logging
from collections import Counter
from typing import List, Optional, Set

from ...config import PACKAGE_FILE
from ..errors import ValidationError
from ..models import Manifest, Metadata, ParSmil, StructuredContent
from .references import DocumentRef, ReferenceTable, resolve_references

logger = logging.getLogger(__name__)


def _body_ids(content: StructuredContent) -> Set[str]:
    ids = set()
    for node in content.body:
        for el in node.iter():
            if isinstance(el.tag, str) and el.get("id"):
                ids.add(el.get("id"))
    return ids


def _check_fragments(doc: DocumentRef) -> List[str]:
    smil = doc.file.smil
    if smil is None or not isinstance(smil.content, ParSmil):
        return []

    problems = []
    known_ids = None
    if isinstance(doc.file.content, StructuredContent):
        known_ids = _body_ids(doc.file.content)

    for par in smil.content.pars:
        if not par.text_fragment.startswith("#"):
            problems.append(
                f"{doc.item.href}: text fragment {par.text_fragment!r} must start with '#'"
            )
        elif known_ids is not None and par.text_fragment[1:] not in known_ids:
            problems.append(
                f"{doc.item.href}: text fragment {par.text_fragment!r} matches no element id"
            )
    return problems


def find_problems(
    metadata: Metadata, manifest: Manifest, refs: Optional[ReferenceTable] = None
) -> List[str]:
    """
    Liste les problèmes du couple métadonnées/manifeste.

    Args:
        metadata: Métadonnées du livre
        manifest: Manifeste du livre
        refs: Table de références déjà résolue pour ce manifeste, résolue
            ici si absente

    Returns:
        Liste de messages, vide si tout est valide
    """
    problems = []

    if not metadata.identifier or not metadata.identifier.strip():
        problems.append("metadata identifier is empty")

    if refs is None:
        refs = resolve_references(manifest)
    paths = [PACKAGE_FILE] + [item.href for item in refs.manifest_items()]
    for path, count in Counter(paths).items():
        if count > 1:
            problems.append(f"archive path {path!r} is used {count} times")

    for doc in refs.documents():
        problems.extend(_check_fragments(doc))

    return problems


def validate_manifest(
    metadata: Metadata, manifest: Manifest, refs: Optional[ReferenceTable] = None
) -> None:
    """
    Valide le manifeste.

    Raises:
        ValidationError: Avec la liste complète des problèmes trouvés
    """
    problems = find_problems(metadata, manifest, refs)
    if problems:
        logger.error("Manifest validation failed for %s: %s", metadata.identifier, problems)
        raise ValidationError(problems)
