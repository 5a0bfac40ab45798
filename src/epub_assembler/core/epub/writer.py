"""
Module d'écriture EPUB.

Responsabilité unique: assembler l'archive zip d'un EPUB 3 à partir des
métadonnées et du manifeste, dans un ordre d'entrées fixe:

    mimetype, META-INF/container.xml, package.opf, _nav.xhtml, couverture,
    page de titre puis contenus (chacun suivi de son SMIL), autres
    fichiers, feuilles de style.
"""

import logging
import os
import zipfile
from contextlib import ExitStack, closing
from typing import BinaryIO, Iterator, Optional, Tuple

from lxml import etree

from ...config import (
    BINARY_COMPRESS_LEVEL,
    CONTAINER_ENTRY,
    CONTAINER_NS,
    CONTENT_ROOT,
    MIMETYPE,
    MIMETYPE_ENTRY,
    PACKAGE_FILE,
    PACKAGE_MEDIA_TYPE,
    TEXT_COMPRESS_LEVEL,
    ZIP_DATE_TIME,
)
from ..errors import ArchiveError, EpubAssemblyError, InputStreamError
from ..models import (
    AutogeneratedNav,
    ContentFile,
    Manifest,
    Metadata,
    RawContent,
    RawNav,
    RawSmil,
    StructuredContent,
)
from ..xml_utils import to_xml_bytes
from .metadata_defaults import Clock, apply_metadata_defaults
from .navigation import build_navigation_document
from .package import build_package_document
from .references import DocumentRef, ReferenceTable, resolve_references
from .smil import build_smil_document
from .validation import validate_manifest
from .xhtml import render_content_page

logger = logging.getLogger(__name__)

# (méthode de compression, niveau)
Compression = Tuple[int, Optional[int]]

STORED: Compression = (zipfile.ZIP_STORED, None)
TEXT: Compression = (zipfile.ZIP_DEFLATED, TEXT_COMPRESS_LEVEL)
BINARY: Compression = (zipfile.ZIP_DEFLATED, BINARY_COMPRESS_LEVEL)


def content_path(href: str) -> str:
    """Chemin d'une entrée sous la racine du contenu."""
    return f"{CONTENT_ROOT}/{href}"


def build_container_document() -> bytes:
    """Construit META-INF/container.xml pointant vers le document de package."""
    container = etree.Element(f"{{{CONTAINER_NS}}}container", nsmap={None: CONTAINER_NS})
    container.set("version", "1.0")
    rootfiles = etree.SubElement(container, f"{{{CONTAINER_NS}}}rootfiles")
    rootfile = etree.SubElement(rootfiles, f"{{{CONTAINER_NS}}}rootfile")
    rootfile.set("full-path", content_path(PACKAGE_FILE))
    rootfile.set("media-type", PACKAGE_MEDIA_TYPE)
    return to_xml_bytes(container)


class EntryWriter:
    """
    Écrit les entrées dans l'archive, une à la fois.

    Chaque flux d'entrée est lu entièrement puis fermé avant la création de
    l'entrée: un flux en échec ne laisse jamais d'entrée partielle.
    """

    def __init__(self, archive: zipfile.ZipFile):
        self.archive = archive
        self.names = []

    def write_bytes(self, name: str, data: bytes, compression: Compression):
        compress_type, level = compression
        info = zipfile.ZipInfo(name, date_time=ZIP_DATE_TIME)
        info.compress_type = compress_type
        info.external_attr = 0o644 << 16
        try:
            self.archive.writestr(info, data, compresslevel=level)
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            raise ArchiveError(f"Failed to write entry {name}: {e}") from e
        self.names.append(name)
        logger.debug("Wrote %s (%d bytes)", name, len(data))

    def copy_stream(self, name: str, stream: BinaryIO, compression: Compression):
        with closing(stream):
            try:
                data = stream.read()
            except OSError as e:
                raise InputStreamError(name, e) from e
        self.write_bytes(name, data, compression)


# --- Helpers d'écriture ---


def _document_streams(content_file: ContentFile) -> Iterator[BinaryIO]:
    if isinstance(content_file.content, RawContent):
        yield content_file.content.stream
    if content_file.smil is not None and isinstance(content_file.smil.content, RawSmil):
        yield content_file.smil.content.stream


def manifest_streams(manifest: Manifest) -> Iterator[BinaryIO]:
    """Tous les flux de l'appelant référencés par le manifeste."""
    if isinstance(manifest.navigation, RawNav):
        yield manifest.navigation.stream
    if manifest.cover_image is not None:
        yield manifest.cover_image.stream
    for content_file in [manifest.title_page, *manifest.content_files]:
        yield from _document_streams(content_file)
    for other in manifest.other_files:
        yield other.stream
    for css in manifest.css_files:
        yield css.stream


def _open_archive(sink: BinaryIO) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(sink, mode="w")
    except (OSError, ValueError) as e:
        raise ArchiveError(f"Failed to open archive sink: {e}") from e


def _write_navigation(writer: EntryWriter, manifest: Manifest, refs: ReferenceTable):
    name = content_path(refs.nav.href)
    match manifest.navigation:
        case RawNav(stream=stream):
            writer.copy_stream(name, stream, TEXT)
        case AutogeneratedNav():
            writer.write_bytes(name, build_navigation_document(refs), TEXT)
        case other:
            raise TypeError(f"Unsupported navigation input: {other!r}")


def _write_document(writer: EntryWriter, doc: DocumentRef, manifest: Manifest):
    """Écrit un fichier de contenu puis, le cas échéant, son SMIL."""
    name = content_path(doc.item.href)
    match doc.file.content:
        case RawContent(stream=stream):
            writer.copy_stream(name, stream, TEXT)
        case StructuredContent(body=body):
            page = render_content_page(doc.file.title, body, manifest.css_files)
            writer.write_bytes(name, page, TEXT)
        case other:
            raise TypeError(f"Unsupported content input: {other!r}")

    if doc.smil is None:
        return

    smil_name = content_path(doc.smil.href)
    match doc.file.smil.content:
        case RawSmil(stream=stream):
            writer.copy_stream(smil_name, stream, TEXT)
        case _:
            writer.write_bytes(smil_name, build_smil_document(doc.file.smil, doc.item.href), TEXT)


def _write_entries(
    writer: EntryWriter, metadata: Metadata, manifest: Manifest, refs: ReferenceTable
):
    # Le mimetype doit être la première entrée, non compressée
    writer.write_bytes(MIMETYPE_ENTRY, MIMETYPE.encode("ascii"), STORED)
    writer.write_bytes(CONTAINER_ENTRY, build_container_document(), TEXT)
    writer.write_bytes(
        content_path(PACKAGE_FILE), build_package_document(metadata, refs), TEXT
    )
    _write_navigation(writer, manifest, refs)

    if manifest.cover_image is not None:
        writer.copy_stream(content_path(refs.cover.href), manifest.cover_image.stream, STORED)

    for doc in refs.documents():
        _write_document(writer, doc, manifest)

    for other, ref in zip(manifest.other_files, refs.others):
        writer.copy_stream(content_path(ref.href), other.stream, BINARY if other.compress else STORED)

    for css, ref in zip(manifest.css_files, refs.css):
        writer.copy_stream(content_path(ref.href), css.stream, TEXT)


# --- Fonctions principales d'écriture ---


def write_epub(
    sink: BinaryIO,
    metadata: Metadata,
    manifest: Manifest,
    *,
    clock: Optional[Clock] = None,
    validate: bool = True,
) -> None:
    """
    Écrit un EPUB 3 complet dans `sink`.

    Les références sont résolues une seule fois puis partagées par la
    validation, le package, la navigation et les SMIL. Tous les flux du
    manifeste sont fermés en sortie, y compris en cas d'erreur. En cas
    d'erreur l'archive est incomplète et doit être jetée par l'appelant.

    Args:
        sink: Flux binaire de sortie (fichier, BytesIO...)
        metadata: Métadonnées du livre
        manifest: Manifeste du livre
        clock: Source de l'heure pour dcterms:modified par défaut
        validate: Si False, conserve le comportement permissif (aucune
            vérification des noms de fichiers ni des fragments)

    Raises:
        ValidationError: Si le manifeste est invalide (validate=True)
        InputStreamError: Si un flux de l'appelant échoue
        ArchiveError: Si l'archive de sortie ne peut pas être écrite
    """
    logger.info("--- START WRITE EPUB - %s ---", metadata.identifier)

    with ExitStack() as streams:
        for stream in manifest_streams(manifest):
            streams.enter_context(closing(stream))

        refs = resolve_references(manifest)
        if validate:
            validate_manifest(metadata, manifest, refs)

        metadata = apply_metadata_defaults(metadata, manifest, clock)

        try:
            with _open_archive(sink) as archive:
                writer = EntryWriter(archive)
                _write_entries(writer, metadata, manifest, refs)
        except EpubAssemblyError:
            logger.exception("Error writing epub %s", metadata.identifier)
            raise
        except (OSError, zipfile.LargeZipFile) as e:
            logger.exception("Archive sink failed for %s", metadata.identifier)
            raise ArchiveError(f"Failed to finalize archive: {e}") from e

    logger.info("WROTE EPUB %s (%d entries). SUCCESS.", metadata.identifier, len(writer.names))


def write_epub_file(epub_path: str, metadata: Metadata, manifest: Manifest, **kwargs) -> None:
    """
    Écrit un EPUB sur disque de manière sécurisée.

    Utilise un fichier temporaire pour éviter de laisser une archive
    incomplète à la destination en cas d'échec.

    Args:
        epub_path: Chemin de destination
        metadata: Métadonnées du livre
        manifest: Manifeste du livre
        **kwargs: Options transmises à write_epub

    Raises:
        EpubAssemblyError: Si l'assemblage échoue
        OSError: Si le fichier temporaire ne peut pas être créé ou renommé
    """
    temp_epub_path = epub_path + ".tmp"

    try:
        with open(temp_epub_path, "wb") as sink:
            write_epub(sink, metadata, manifest, **kwargs)
        os.replace(temp_epub_path, epub_path)
        logger.info("Replaced %s with temporary file.", epub_path)

    except Exception:
        logger.exception("Failed during temp write or replace: %s", epub_path)

        # Nettoyer le fichier temporaire en cas d'échec
        if os.path.exists(temp_epub_path):
            os.remove(temp_epub_path)
        raise
