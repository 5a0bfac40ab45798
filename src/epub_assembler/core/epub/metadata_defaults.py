"""
Module des valeurs par défaut des métadonnées.

Responsabilité unique: compléter les métadonnées manquantes au début de
la génération (date de modification, langue) sans modifier l'original.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from ...config import DEFAULT_LANGUAGE, LANGUAGE_DETECT_SEED, LANGUAGE_SAMPLE_SIZE
from ..models import Manifest, Metadata, StructuredContent

logger = logging.getLogger(__name__)

# Graine fixée une fois pour tout le processus: détection reproductible
DetectorFactory.seed = LANGUAGE_DETECT_SEED

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _structured_text(manifest: Manifest) -> str:
    """Concatène le texte des pages structurées (les flux bruts ne sont pas lus)."""
    parts = []
    for content_file in [manifest.title_page, *manifest.content_files]:
        if isinstance(content_file.content, StructuredContent):
            for node in content_file.content.body:
                parts.append(" ".join(node.itertext()))
    return " ".join(parts)


def detect_language(manifest: Manifest) -> Optional[str]:
    """
    Détecte la langue du livre depuis le texte des pages structurées.

    Fallback utilisé quand aucune langue n'est déclarée.
    Analyse les LANGUAGE_SAMPLE_SIZE premiers caractères.
    La graine de langdetect est fixée à l'import du module, pas ici.

    Args:
        manifest: Manifeste du livre

    Returns:
        Code de langue (ex: 'fr', 'en') ou None si échec
    """
    sample = _structured_text(manifest)[:LANGUAGE_SAMPLE_SIZE]
    if not sample.strip():
        return None

    try:
        detected = detect(sample)
    except LangDetectException:
        logger.info("Language detection failed.", exc_info=True)
        return None

    logger.info("Language detected from text: %s", detected)
    return detected


def apply_metadata_defaults(
    metadata: Metadata, manifest: Manifest, clock: Optional[Clock] = None
) -> Metadata:
    """
    Retourne une copie des métadonnées avec les valeurs par défaut appliquées.

    - modified_at absent: heure fournie par `clock` (UTC par défaut)
    - aucune langue: langue détectée, sinon DEFAULT_LANGUAGE

    Args:
        metadata: Métadonnées de l'appelant
        manifest: Manifeste (pour la détection de langue)
        clock: Source de l'heure courante, injectable pour les tests

    Returns:
        Nouvel objet Metadata
    """
    changes = {}

    if metadata.modified_at is None:
        changes["modified_at"] = (clock or utc_now)()

    if not metadata.languages:
        language = detect_language(manifest) or DEFAULT_LANGUAGE
        logger.warning(
            "No language declared for %s, using %s", metadata.identifier, language
        )
        changes["languages"] = [language]

    return replace(metadata, **changes) if changes else metadata
