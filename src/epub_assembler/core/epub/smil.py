"""
Module de génération des documents SMIL (media overlays).

Un document SMIL est produit pour chaque fichier de contenu (page de titre
incluse) qui déclare un SmilFile.
"""

import logging
from datetime import timedelta

from lxml import etree

from ...config import OPS_NS, SMIL_NS
from ..models import ClockValue, ParSmil, RawSmil, SmilFile, StructuredSmil
from ..xml_utils import qualified_copy, to_xml_bytes

logger = logging.getLogger(__name__)

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000


def format_clock_value(value: ClockValue) -> str:
    """
    Formate une valeur d'horloge SMIL.

    Les durées sont rendues en hh:mm:ss, ou hh:mm:ss.fff quand la
    composante millisecondes n'est pas nulle. Les chaînes sont émises
    telles quelles.

    Args:
        value: timedelta, nombre de secondes ou chaîne littérale

    Returns:
        Valeur d'horloge, ex: "00:00:05" ou "00:00:02.500"
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, timedelta):
        value = timedelta(seconds=value)
    if value < timedelta(0):
        raise ValueError(f"Negative clock value: {value}")

    total_ms = value // timedelta(milliseconds=1)
    hours, rest = divmod(total_ms, _MS_PER_HOUR)
    minutes, rest = divmod(rest, _MS_PER_MINUTE)
    seconds, millis = divmod(rest, 1000)

    clock = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if millis:
        clock += f".{millis:03d}"
    return clock


def _smil_root() -> etree._Element:
    return etree.Element(
        f"{{{SMIL_NS}}}smil", nsmap={None: SMIL_NS, "epub": OPS_NS}, version="3.0"
    )


def _smil_body(root: etree._Element, text_href: str) -> etree._Element:
    body = etree.SubElement(root, f"{{{SMIL_NS}}}body")
    body.set(f"{{{OPS_NS}}}textref", text_href)
    return body


def _build_structured(smil: StructuredSmil, text_href: str) -> bytes:
    root = _smil_root()
    head = etree.SubElement(root, f"{{{SMIL_NS}}}head")
    head.extend(qualified_copy(smil.head, SMIL_NS))
    body = _smil_body(root, text_href)
    body.extend(qualified_copy(smil.body, SMIL_NS))
    return to_xml_bytes(root)


def _build_pars(smil: ParSmil, text_href: str) -> bytes:
    root = _smil_root()
    body = _smil_body(root, text_href)
    for par in smil.pars:
        par_el = etree.SubElement(body, f"{{{SMIL_NS}}}par")
        etree.SubElement(par_el, f"{{{SMIL_NS}}}text", src=text_href + par.text_fragment)
        audio = etree.SubElement(par_el, f"{{{SMIL_NS}}}audio", src=smil.audio_ref)
        audio.set("clipBegin", format_clock_value(par.clip_begin))
        audio.set("clipEnd", format_clock_value(par.clip_end))
    logger.debug("Built %d par(s) for %s", len(smil.pars), text_href)
    return to_xml_bytes(root)


def build_smil_document(smil: SmilFile, text_href: str) -> bytes:
    """
    Construit le document SMIL d'un fichier de contenu.

    Args:
        smil: Description du SMIL
        text_href: href du fichier XHTML associé (epub:textref)

    Returns:
        Octets du document

    Raises:
        TypeError: Pour un SMIL brut, copié tel quel par l'assembleur
    """
    match smil.content:
        case RawSmil():
            raise TypeError("Raw SMIL input is copied verbatim, not built")
        case StructuredSmil() as structured:
            return _build_structured(structured, text_href)
        case ParSmil() as pars:
            return _build_pars(pars, text_href)
        case other:
            raise TypeError(f"Unsupported SMIL input: {other!r}")
