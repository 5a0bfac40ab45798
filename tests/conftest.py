# tests/conftest.py
"""
Configuration globale pour pytest.

Fournit des fixtures réutilisables pour tous les tests.
"""

import zipfile
from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest
from lxml import etree
from lxml.builder import E

from epub_assembler.config import DC_NS, OPF_NS, OPS_NS, SMIL_NS, XHTML_NS
from epub_assembler.core.epub.writer import write_epub
from epub_assembler.core.models import (
    ContentFile,
    CssFile,
    Manifest,
    Metadata,
    Navigation,
    OtherFile,
    ParNode,
    ParSmil,
    SmilFile,
    StructuredContent,
)

FIXED_NOW = datetime(2010, 10, 10, 0, 0, 0, tzinfo=timezone.utc)

NS = {"opf": OPF_NS, "dc": DC_NS, "x": XHTML_NS, "epub": OPS_NS, "s": SMIL_NS}


@pytest.fixture
def fixed_clock():
    """Horloge injectable retournant toujours FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def sample_metadata() -> Metadata:
    """Retourne des métadonnées minimales pour tests."""
    return Metadata(
        identifier="b1",
        title="T",
        languages=["en"],
        creators=["A"],
        modified_at=FIXED_NOW,
    )


@pytest.fixture
def title_page() -> ContentFile:
    """Page de titre structurée avec un seul titre."""
    return ContentFile(
        file_name="title.xhtml",
        title="Title page",
        content=StructuredContent([E.h1("Odyssey")]),
    )


@pytest.fixture
def make_book():
    """
    Fabrique d'un livre complet (métadonnées + manifeste).

    Les flux étant consommés à l'écriture, chaque appel retourne un
    manifeste neuf.
    """

    def _make():
        metadata = Metadata(
            identifier="54645-3231-54",
            title="Ὀδύσσεια",
            languages=["en", "grc"],
            creators=["Ὅμηρος"],
            modified_at=FIXED_NOW,
        )
        title = ContentFile(
            file_name="title.xhtml",
            title="Title page",
            content=StructuredContent([E.h1("Odyssey")]),
        )
        p1 = ContentFile(
            file_name="p1.xhtml",
            title="Page one",
            content=StructuredContent(
                [
                    E.div("Ἄνδρα μοι ἔννεπε, Μοῦσα, πολύτροπον", id="s1"),
                    E.div("πλάγχθη, ἐπεὶ Τροίης ἱερὸν πτολίεθρον ἔπερσε·", id="s2"),
                ]
            ),
            navigation=Navigation.LINEAR,
            smil=SmilFile(
                duration=timedelta(seconds=2.5),
                content=ParSmil(
                    audio_ref="audio/p1.mp3",
                    pars=[
                        ParNode("#s1", timedelta(0), timedelta(seconds=1)),
                        ParNode("#s2", timedelta(seconds=1), timedelta(seconds=2.5)),
                    ],
                ),
            ),
        )
        p2 = ContentFile(
            file_name="p2.xhtml",
            title="Page two",
            content=StructuredContent([E.h2("yup again")]),
            navigation=Navigation.NON_LINEAR,
        )
        notes = ContentFile(
            file_name="notes.xhtml",
            title="Notes",
            content=StructuredContent([E.p("hidden")]),
        )
        manifest = Manifest(
            title_page=title,
            content_files=[p1, p2, notes],
            css_files=[CssFile("style.css", BytesIO(b"body { margin: 0; }"))],
            other_files=[
                OtherFile("audio/p1.mp3", "audio/mpeg", BytesIO(b"ID3fake"), compress=False),
                OtherFile("data.json", "application/json", BytesIO(b'{"a": 1}')),
            ],
        )
        return metadata, manifest

    return _make


@pytest.fixture
def build_epub():
    """Écrit un EPUB en mémoire et retourne ses octets."""

    def _build(metadata, manifest, **kwargs) -> bytes:
        sink = BytesIO()
        write_epub(sink, metadata, manifest, **kwargs)
        return sink.getvalue()

    return _build


@pytest.fixture
def open_zip():
    """Ouvre des octets d'archive comme ZipFile."""

    def _open(data: bytes) -> zipfile.ZipFile:
        return zipfile.ZipFile(BytesIO(data))

    return _open


@pytest.fixture
def parse_entry():
    """Parse une entrée XML d'une archive."""

    def _parse(zf: zipfile.ZipFile, name: str):
        return etree.fromstring(zf.read(name))

    return _parse


@pytest.fixture
def ns():
    """Préfixes XPath des espaces de noms EPUB."""
    return NS
