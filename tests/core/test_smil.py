# tests/core/test_smil.py
"""
Tests pour le module core.epub.smil.
"""

from datetime import timedelta
from io import BytesIO

import pytest
from lxml import etree
from lxml.builder import E

from epub_assembler.core.epub.smil import build_smil_document, format_clock_value
from epub_assembler.core.models import ParNode, ParSmil, RawSmil, SmilFile, StructuredSmil


class TestFormatClockValue:
    """Tests pour format_clock_value."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (timedelta(seconds=5), "00:00:05"),
            (timedelta(seconds=2.5), "00:00:02.500"),
            (5, "00:00:05"),
            (2.5, "00:00:02.500"),
            (timedelta(minutes=1, seconds=1, milliseconds=250), "00:01:01.250"),
            (timedelta(hours=26), "26:00:00"),
        ],
    )
    def test_durations(self, value, expected):
        """Test du format hh:mm:ss[.fff]."""
        assert format_clock_value(value) == expected

    def test_literal_passthrough(self):
        """Test qu'une chaîne est émise telle quelle."""
        assert format_clock_value("00:00:02.500") == "00:00:02.500"
        assert format_clock_value("2.5s") == "2.5s"

    def test_sub_millisecond_ignored(self):
        """Test que les microsecondes seules ne forcent pas les millisecondes."""
        assert format_clock_value(timedelta(microseconds=999)) == "00:00:00"

    def test_negative_rejected(self):
        """Test qu'une durée négative est refusée."""
        with pytest.raises(ValueError):
            format_clock_value(timedelta(seconds=-1))


class TestBuildSmilDocument:
    """Tests pour build_smil_document."""

    def test_structured(self, ns):
        """Test de l'enveloppe smil/head/body."""
        seq = E.seq(E.par(E.text(src="p.xhtml#a")), id="s1")
        smil = SmilFile("00:00:01", StructuredSmil(head=[E.meta(name="x")], body=[seq]))
        root = etree.fromstring(build_smil_document(smil, "p.xhtml"))

        assert root.tag == f"{{{ns['s']}}}smil"
        assert root.get("version") == "3.0"
        assert len(root.xpath("/s:smil/s:head/s:meta", namespaces=ns)) == 1
        body = root.xpath("/s:smil/s:body", namespaces=ns)[0]
        assert body.get(f"{{{ns['epub']}}}textref") == "p.xhtml"
        assert body.xpath("s:seq/s:par/s:text/@src", namespaces=ns) == ["p.xhtml#a"]

    def test_structured_does_not_mutate_input(self):
        """Test que les noeuds de l'appelant restent intacts."""
        seq = E.seq(E.par())
        smil = SmilFile("00:00:01", StructuredSmil(body=[seq]))
        build_smil_document(smil, "p.xhtml")

        assert seq.tag == "seq"
        assert seq.getparent() is None

    def test_par_nodes(self, ns):
        """Test d'un <par> par ParNode contre un seul fichier audio."""
        smil = SmilFile(
            timedelta(seconds=3),
            ParSmil(
                audio_ref="audio/ch1.mp3",
                pars=[
                    ParNode("#w1", timedelta(0), timedelta(seconds=1.2)),
                    ParNode("#w2", "00:00:01.200", "00:00:03"),
                ],
            ),
        )
        root = etree.fromstring(build_smil_document(smil, "ch1.xhtml"))
        pars = root.xpath("//s:par", namespaces=ns)

        assert len(pars) == 2
        assert root.xpath("//s:head", namespaces=ns) == []
        assert root.xpath("//s:text/@src", namespaces=ns) == ["ch1.xhtml#w1", "ch1.xhtml#w2"]
        assert set(root.xpath("//s:audio/@src", namespaces=ns)) == {"audio/ch1.mp3"}
        assert root.xpath("//s:audio/@clipEnd", namespaces=ns) == ["00:00:01.200", "00:00:03"]

    def test_raw_is_not_built(self):
        """Test qu'un SMIL brut n'est pas reconstruit."""
        with pytest.raises(TypeError):
            build_smil_document(SmilFile("00:00:01", RawSmil(BytesIO())), "p.xhtml")
