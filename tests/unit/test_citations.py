"""Tests for citation detection and verification against known articles."""

import pytest

from regclear.artifacts.citations import (
    KNOWN_ARTICLES,
    LAW_KEYWORDS,
    NOTE_OUT_OF_RANGE,
    NOTE_UNKNOWN_LAW,
    detect_law,
    find_references,
    flag_unverified_citations,
    validate_citation,
    validate_citations,
)
from regclear.models import Citation


def cite(law, article):
    return Citation(law=law, article=article, text=f"{article} {law}")


class TestDetectLaw:

    @pytest.mark.parametrize("line,law", [
        ("Article 35 GDPR", "GDPR (EU) 2016/679"),
        ("Article 35 of the UK GDPR", "UK GDPR"),
        ("Article 9 of the AI Act", "EU AI Act (EU) 2024/1689"),
        ("Annex III point 4", "EU AI Act (EU) 2024/1689"),
        ("Section 5 of the FTC Act", "FTC Act"),
        ("NYC Local Law 144 bias audit", "NYC Local Law 144"),
        ("Colorado AI Act, C.R.S. 6-1-1703", "Colorado AI Act"),
        ("NIST AI 600-1 profile", "NIST AI 600-1"),
        ("NIST AI RMF Map function", "NIST AI RMF"),
        ("Model validation under SR 11-7", "SR 11-7"),
        ("Article 7 of the LGPD", "LGPD"),
    ])
    def test_detects(self, line, law):
        assert detect_law(line) == law

    def test_unknown(self):
        assert detect_law("Article 12 of the statute") == "Unknown"

    def test_every_detected_law_has_known_articles(self):
        for law, _ in LAW_KEYWORDS:
            assert law in KNOWN_ARTICLES


class TestFindReferences:

    def test_mixed_references_in_order(self):
        line = "Annex IV and Articles 13-14 GDPR, Section 1798.100 and Article 22(3)(a)"
        assert find_references(line) == [
            "Annex IV", "Articles 13-14", "Section 1798.100", "Article 22(3)(a)",
        ]

    def test_none(self):
        assert find_references("no legal text") == []

    @pytest.mark.parametrize("line,reference", [
        ("Article  35", "Article 35"),
        ("Article\t35", "Article 35"),
        ("Articles 13 - 14", "Articles 13-14"),
        ("Articles 13–14", "Articles 13-14"),
        ("Articles 13 –  14", "Articles 13-14"),
        ("Annex  III", "Annex III"),
    ])
    def test_normalizes_spacing_and_dashes(self, line, reference):
        assert find_references(line) == [reference]


class TestValidateCitation:

    def test_in_range(self):
        assert validate_citation(cite("GDPR (EU) 2016/679", "Article 35")) is None

    def test_out_of_range(self):
        assert validate_citation(cite("GDPR (EU) 2016/679", "Article 150")) == NOTE_OUT_OF_RANGE

    def test_unknown_law(self):
        assert validate_citation(cite("Unknown", "Article 1")) == NOTE_UNKNOWN_LAW

    def test_whole_act_accepts_anything(self):
        assert validate_citation(cite("Colorado AI Act", "Section 6")) is None

    def test_annexes(self):
        law = "EU AI Act (EU) 2024/1689"
        assert validate_citation(cite(law, "Annex III")) is None
        assert validate_citation(cite(law, "Annex XIV")) == NOTE_OUT_OF_RANGE

    def test_dotted_sections(self):
        assert validate_citation(cite("CCPA/CPRA", "Section 1798.100")) is None
        assert validate_citation(cite("CCPA/CPRA", "Section 1798.300")) == NOTE_OUT_OF_RANGE

    def test_range_uses_first_article(self):
        assert validate_citation(cite("EU AI Act (EU) 2024/1689", "Articles 8-15")) is None


class TestFlagUnverified:

    def test_formats_notes(self):
        citations = [
            cite("GDPR (EU) 2016/679", "Article 35"),
            cite("GDPR (EU) 2016/679", "Article 150"),
            cite("Unknown", "Article 3"),
        ]
        assert validate_citations(citations) == [
            f"GDPR (EU) 2016/679 Article 150: {NOTE_OUT_OF_RANGE}",
            f"Unknown Article 3: {NOTE_UNKNOWN_LAW}",
        ]

        notes = flag_unverified_citations(citations, ["DRAFT"])
        assert notes[0] == "DRAFT"
        assert notes[1].startswith("WARNING: 2 citation(s) could not be verified")
        assert notes[2] == f"  - GDPR (EU) 2016/679 Article 150: {NOTE_OUT_OF_RANGE}"
        assert len(notes) == 4

    def test_all_verified_leaves_notes_unchanged(self):
        original = ["DRAFT"]
        notes = flag_unverified_citations([cite("FTC Act", "Section 5")], original)
        assert notes == ["DRAFT"]
        assert notes is not original
