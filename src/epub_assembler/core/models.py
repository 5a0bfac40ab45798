"""
Modèle de données décrivant un livre à assembler.

Toutes les entités sont des valeurs immuables construites par l'appelant
avant l'écriture; l'assembleur ne fait que les lire.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import BinaryIO, List, Union

from lxml import etree

# Une valeur d'horloge SMIL: durée, nombre de secondes ou chaîne littérale
# émise telle quelle.
ClockValue = Union[timedelta, int, float, str]


class Navigation(Enum):
    """Rôle d'un fichier de contenu dans l'ordre de lecture."""

    # Contenu principal, lu séquentiellement
    LINEAR = "linear"
    # Contenu auxiliaire, accessible hors séquence
    NON_LINEAR = "non-linear"


# --- Entrées de contenu (union étiquetée) ---


@dataclass(frozen=True)
class RawContent:
    """Page XHTML déjà construite, copiée telle quelle."""

    stream: BinaryIO


@dataclass(frozen=True)
class StructuredContent:
    """Noeuds de corps enveloppés dans une page XHTML générée."""

    body: List[etree._Element] = field(default_factory=list)


ContentInput = Union[RawContent, StructuredContent]


# --- Document de navigation ---


@dataclass(frozen=True)
class AutogeneratedNav:
    """Table des matières générée depuis le manifeste."""


@dataclass(frozen=True)
class RawNav:
    """Document de navigation fourni par l'appelant."""

    stream: BinaryIO


NavInput = Union[AutogeneratedNav, RawNav]


# --- SMIL ---


@dataclass(frozen=True)
class ParNode:
    """Paire texte/audio simplifiée d'un overlay."""

    text_fragment: str
    clip_begin: ClockValue
    clip_end: ClockValue


@dataclass(frozen=True)
class RawSmil:
    stream: BinaryIO


@dataclass(frozen=True)
class StructuredSmil:
    head: List[etree._Element] = field(default_factory=list)
    body: List[etree._Element] = field(default_factory=list)


@dataclass(frozen=True)
class ParSmil:
    """Liste de <par> contre un unique fichier audio."""

    audio_ref: str
    pars: List[ParNode] = field(default_factory=list)


SmilInput = Union[RawSmil, StructuredSmil, ParSmil]


@dataclass(frozen=True)
class SmilFile:
    duration: ClockValue
    content: SmilInput


# --- Fichiers du manifeste ---


@dataclass(frozen=True)
class ContentFile:
    """
    Fichier XHTML du livre.

    Le nom de fichier sert à la fois de chemin dans l'archive et de href
    dans les documents générés. Sans rôle de navigation, le fichier est
    exclu de la table des matières et marqué non linéaire dans le spine.
    """

    file_name: str
    title: str
    content: ContentInput
    navigation: Navigation | None = None
    smil: SmilFile | None = None


@dataclass(frozen=True)
class CssFile:
    file_name: str
    stream: BinaryIO


@dataclass(frozen=True)
class OtherFile:
    file_name: str
    media_type: str
    stream: BinaryIO
    compress: bool = True


@dataclass(frozen=True)
class CoverImage:
    stream: BinaryIO
    media_type: str
    # Extension avec le point, ex: ".jpg"
    extension: str


@dataclass(frozen=True)
class Manifest:
    title_page: ContentFile
    content_files: List[ContentFile] = field(default_factory=list)
    css_files: List[CssFile] = field(default_factory=list)
    other_files: List[OtherFile] = field(default_factory=list)
    cover_image: CoverImage | None = None
    navigation: NavInput = field(default_factory=AutogeneratedNav)


# --- Métadonnées ---


@dataclass(frozen=True)
class MediaOverlay:
    total_duration: ClockValue
    active_class: str | None = None
    playback_active_class: str | None = None
    narrators: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Metadata:
    """Métadonnées du document de package."""

    identifier: str
    title: str
    # La première langue est la langue principale
    languages: List[str] = field(default_factory=list)
    # None: l'heure courante (UTC) au moment de l'écriture
    modified_at: datetime | None = None
    creators: List[str] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)
    source: str | None = None
    description: str | None = None
    publisher: str | None = None
    rights: str | None = None
    media_overlay: MediaOverlay | None = None
