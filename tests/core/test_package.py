# tests/core/test_package.py
"""
Tests pour le module core.epub.package.
"""

from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest
from lxml import etree

from epub_assembler.core.epub.package import build_package_document, format_modified
from epub_assembler.core.epub.references import resolve_references
from epub_assembler.core.models import (
    ContentFile,
    CoverImage,
    Manifest,
    MediaOverlay,
    Metadata,
    RawSmil,
    SmilFile,
    StructuredContent,
)

FIXED_NOW = datetime(2010, 10, 10, tzinfo=timezone.utc)


def _build(metadata, manifest):
    return etree.fromstring(build_package_document(metadata, resolve_references(manifest)))


def _meta(root, ns, prop):
    return root.xpath(f"//opf:meta[@property='{prop}']", namespaces=ns)


class TestFormatModified:
    """Tests pour format_modified."""

    def test_utc(self):
        assert format_modified(FIXED_NOW) == "2010-10-10T00:00:00Z"

    def test_naive_is_utc(self):
        """Test qu'une date naïve est considérée UTC."""
        assert format_modified(datetime(2020, 1, 2, 3, 4, 5, 678)) == "2020-01-02T03:04:05Z"

    def test_converted_to_utc(self):
        """Test la conversion depuis un autre fuseau."""
        value = datetime(2020, 1, 2, 3, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_modified(value) == "2020-01-02T01:00:00Z"


class TestPackageRoot:
    """Tests pour l'élément <package>."""

    def test_root_attributes(self, sample_metadata, title_page, ns):
        root = _build(sample_metadata, Manifest(title_page=title_page))

        assert root.tag == f"{{{ns['opf']}}}package"
        assert root.get("version") == "3.0"
        assert root.get("unique-identifier") == "id"
        assert root.get("prefix") == "media: http://www.idpf.org/epub/vocab/overlays/#"
        assert root.nsmap["dc"] == ns["dc"]


class TestMetadataSection:
    """Tests pour la section <metadata>."""

    def test_required_fields(self, make_book, ns):
        """Test identifiant, titre, auteurs, langues et date."""
        metadata, manifest = make_book()
        root = _build(metadata, manifest)
        md = root.xpath("/opf:package/opf:metadata", namespaces=ns)[0]

        ident = md.xpath("dc:identifier", namespaces=ns)[0]
        assert (ident.get("id"), ident.text) == ("id", "54645-3231-54")
        assert md.xpath("dc:title/text()", namespaces=ns) == ["Ὀδύσσεια"]
        creators = md.xpath("dc:creator", namespaces=ns)
        assert [(c.get("id"), c.text) for c in creators] == [("creator1", "Ὅμηρος")]
        assert md.xpath("dc:language/text()", namespaces=ns) == ["en", "grc"]
        assert [m.text for m in _meta(root, ns, "dcterms:modified")] == ["2010-10-10T00:00:00Z"]

    def test_optional_fields_absent(self, sample_metadata, title_page, ns):
        """Test qu'aucun champ optionnel n'est émis s'il est absent."""
        root = _build(sample_metadata, Manifest(title_page=title_page))

        for name in ("source", "description", "publisher", "subject", "rights"):
            assert root.xpath(f"//dc:{name}", namespaces=ns) == []
        assert _meta(root, ns, "media:duration") == []

    def test_optional_fields_order(self, title_page, ns):
        """Test l'ordre des champs optionnels."""
        metadata = Metadata(
            identifier="b1",
            title="T",
            languages=["en"],
            modified_at=FIXED_NOW,
            source="src",
            description="desc",
            publisher="pub",
            subjects=["s1", "s2"],
            rights="CC0",
        )
        root = _build(metadata, Manifest(title_page=title_page))
        md = root.xpath("/opf:package/opf:metadata", namespaces=ns)[0]
        tail = [etree.QName(el).localname for el in md][-6:]

        assert tail == ["source", "description", "publisher", "subject", "subject", "rights"]

    def test_media_overlay_metadata(self, ns):
        """Test des métadonnées media:* avec SMIL sur la page de titre."""
        title = ContentFile(
            "title.xhtml",
            "T",
            StructuredContent([]),
            smil=SmilFile(timedelta(seconds=1), RawSmil(BytesIO())),
        )
        page = ContentFile(
            "p.xhtml", "P", StructuredContent([]), smil=SmilFile("0:00:04", RawSmil(BytesIO()))
        )
        metadata = Metadata(
            identifier="b1",
            title="T",
            languages=["en"],
            modified_at=FIXED_NOW,
            media_overlay=MediaOverlay(
                total_duration=timedelta(seconds=5),
                active_class="-epub-media-overlay-active",
                playback_active_class="-epub-media-overlay-playing",
                narrators=["Joe", "Ann"],
            ),
        )
        root = _build(metadata, Manifest(title_page=title, content_files=[page]))

        durations = [(m.get("refines"), m.text) for m in _meta(root, ns, "media:duration")]
        assert durations == [
            (None, "00:00:05"),
            ("#title_smil", "00:00:01"),
            ("#item1_smil", "0:00:04"),
        ]
        assert [m.text for m in _meta(root, ns, "media:active-class")] == [
            "-epub-media-overlay-active"
        ]
        assert [m.text for m in _meta(root, ns, "media:playback-active-class")] == [
            "-epub-media-overlay-playing"
        ]
        assert [m.text for m in _meta(root, ns, "media:narrator")] == ["Joe", "Ann"]

    def test_missing_modified_rejected(self, title_page):
        """Test que modified_at doit être résolu avant la construction."""
        metadata = Metadata(identifier="b1", title="T", languages=["en"])

        with pytest.raises(ValueError):
            _build(metadata, Manifest(title_page=title_page))


class TestManifestAndSpine:
    """Tests pour les sections <manifest> et <spine>."""

    def test_manifest_items(self, make_book, ns):
        metadata, manifest = make_book()
        manifest = Manifest(
            title_page=manifest.title_page,
            content_files=manifest.content_files,
            other_files=manifest.other_files,
            css_files=manifest.css_files,
            cover_image=CoverImage(BytesIO(), "image/jpeg", ".jpg"),
        )
        root = _build(metadata, manifest)
        items = {i.get("id"): i for i in root.xpath("//opf:manifest/opf:item", namespaces=ns)}

        assert list(items) == [
            "title",
            "nav",
            "cover-img",
            "item1",
            "item2",
            "item3",
            "item1_smil",
            "other1",
            "other2",
            "css1",
        ]
        assert items["nav"].get("properties") == "nav"
        assert items["cover-img"].get("properties") == "cover-image"
        assert items["cover-img"].get("href") == "cover.jpg"
        assert items["cover-img"].get("media-type") == "image/jpeg"
        assert items["item1"].get("media-overlay") == "item1_smil"
        assert items["item2"].get("media-overlay") is None
        assert items["other1"].get("media-type") == "audio/mpeg"
        assert items["css1"].get("media-type") == "text/css"

    def test_spine_linear(self, make_book, ns):
        metadata, manifest = make_book()
        root = _build(metadata, manifest)
        spine = root.xpath("//opf:spine/opf:itemref", namespaces=ns)

        assert [(i.get("idref"), i.get("linear")) for i in spine] == [
            ("title", "yes"),
            ("nav", "yes"),
            ("item1", "yes"),
            ("item2", "no"),
            ("item3", "no"),
        ]
