"""
Citation detection and verification.

Drafted documents cite legal provisions in free text. Each line is tagged
with the law it most likely refers to, and every extracted reference is
checked against a table of known article ranges so that invented or
out-of-range citations are surfaced in the review notes.
"""

import re
from dataclasses import dataclass, field

from regclear.models.artifacts import Citation

UNKNOWN_LAW = "Unknown"

NOTE_UNKNOWN_LAW = "UNVERIFIED - law not in validation registry"
NOTE_OUT_OF_RANGE = "UNVERIFIED - article number out of known range"


# =============================================================================
# Law detection
# =============================================================================

# Checked in order; the first law whose keyword appears in a line wins.
LAW_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("UK GDPR", ("uk gdpr", "dpa 2018", "data protection act 2018")),
    ("GDPR (EU) 2016/679", ("gdpr", "2016/679")),
    ("Colorado AI Act", ("colorado ai act", "sb 24-205", "sb24-205", "sb 205", "6-1-17")),
    ("EU AI Act (EU) 2024/1689", ("ai act", "2024/1689", "annex iii", "annex xi")),
    ("FTC Act", ("ftc",)),
    ("CCPA/CPRA", ("ccpa", "cpra")),
    ("California SB 942", ("sb 942",)),
    ("LGPD", ("lgpd",)),
    ("PDPA", ("pdpa", "pdpc")),
    ("NYC Local Law 144", ("ll144", "local law 144")),
    ("Illinois BIPA", ("bipa", "biometric information privacy")),
    ("NIST AI 600-1", ("nist ai 600-1", "genai profile")),
    ("NIST AI RMF", ("nist",)),
    ("SR 11-7", ("sr 11-7",)),
    ("MAS AI Risk Management Guidelines", ("mas ", "monetary authority")),
    ("PIPL", ("pipl",)),
)


def detect_law(line: str) -> str:
    """Name the law a line of text refers to, or "Unknown"."""
    lower = line.lower()
    for law, keywords in LAW_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return law
    return UNKNOWN_LAW


# =============================================================================
# Known articles
# =============================================================================

@dataclass(frozen=True)
class LawEntry:
    """Valid references for one law."""

    article_ranges: tuple[tuple[int, int], ...] = ()
    annexes: frozenset[str] = field(default_factory=frozenset)
    whole_act_only: bool = False


WHOLE_ACT = LawEntry(whole_act_only=True)

ROMAN_ANNEXES = frozenset(
    ["I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X", "XI", "XII", "XIII"]
)

KNOWN_ARTICLES: dict[str, LawEntry] = {
    "GDPR (EU) 2016/679": LawEntry(article_ranges=((1, 99),)),
    "UK GDPR": LawEntry(article_ranges=((1, 99),)),
    "EU AI Act (EU) 2024/1689": LawEntry(article_ranges=((1, 113),), annexes=ROMAN_ANNEXES),
    "FTC Act": LawEntry(article_ranges=((1, 5),)),
    # Sections 1798.100 to 1798.199, compared with the dot removed
    "CCPA/CPRA": LawEntry(article_ranges=((1798100, 1798199),)),
    "California SB 942": WHOLE_ACT,
    "LGPD": LawEntry(article_ranges=((1, 65),)),
    "PDPA": WHOLE_ACT,
    "NYC Local Law 144": WHOLE_ACT,
    "Colorado AI Act": WHOLE_ACT,
    "Illinois BIPA": LawEntry(article_ranges=((1, 25),)),
    "NIST AI RMF": WHOLE_ACT,
    "NIST AI 600-1": WHOLE_ACT,
    "SR 11-7": WHOLE_ACT,
    "MAS AI Risk Management Guidelines": WHOLE_ACT,
    "PIPL": LawEntry(article_ranges=((1, 74),)),
}


# =============================================================================
# Reference parsing
# =============================================================================

ARTICLE_PATTERN = re.compile(
    r"Articles?\s+\d+(?:\(\d+\))?(?:\([a-z]\))?"
    r"(?:\s*[-–]\s*\d+(?:\(\d+\))?(?:\([a-z]\))?)?"
)
SECTION_PATTERN = re.compile(r"Section\s+(?:[IVXLCDM]+\b|\d+(?:\.\d+)*)(?:\s*§\s*\d+)?")
ANNEX_PATTERN = re.compile(r"Annex\s+[IVXLCDM]+\b(?:\s*§\s*\d+)?")

_ARTICLE_NUMBER = re.compile(r"Articles?\s+(\d+)", re.IGNORECASE)
_SECTION_NUMBER = re.compile(r"Section\s+(\d+(?:\.\d+)*)", re.IGNORECASE)
_ANNEX_NUMERAL = re.compile(r"Annex\s+([IVXLCDM]+)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_RANGE_DASH = re.compile(r"\s*[-–]\s*")


def normalize_reference(reference: str) -> str:
    """Single spaces, and a bare hyphen for ranges (`Articles 13 – 14` -> `Articles 13-14`)."""
    reference = _WHITESPACE.sub(" ", reference.strip())
    return _RANGE_DASH.sub("-", reference)


def find_references(line: str) -> list[str]:
    """Normalized article, section and annex references in one line, in order of appearance."""
    matches = []
    for pattern in (ARTICLE_PATTERN, SECTION_PATTERN, ANNEX_PATTERN):
        matches.extend(pattern.finditer(line))
    matches.sort(key=lambda m: m.start())
    return [normalize_reference(m.group(0)) for m in matches]


def _parse_reference(reference: str) -> tuple[str, int | str | None]:
    if match := _ARTICLE_NUMBER.search(reference):
        return "article", int(match.group(1))
    if match := _SECTION_NUMBER.search(reference):
        return "section", int(match.group(1).replace(".", ""))
    if match := _ANNEX_NUMERAL.search(reference):
        return "annex", match.group(1).upper()
    return "unparsed", None


# =============================================================================
# Validation
# =============================================================================

def validate_citation(citation: Citation) -> str | None:
    """
    Check one citation against the known articles table.

    Returns:
        None when the citation is plausible, otherwise an UNVERIFIED note
    """
    entry = KNOWN_ARTICLES.get(citation.law)
    if entry is None:
        return NOTE_UNKNOWN_LAW
    if entry.whole_act_only:
        return None

    kind, value = _parse_reference(citation.article)
    if kind == "annex":
        return None if value in entry.annexes else NOTE_OUT_OF_RANGE
    if kind in ("article", "section"):
        if any(low <= value <= high for low, high in entry.article_ranges):
            return None
    return NOTE_OUT_OF_RANGE


def validate_citations(citations: list[Citation] | tuple[Citation, ...]) -> list[str]:
    """One `<law> <article>: <note>` line per citation that failed verification."""
    notes = []
    for citation in citations:
        note = validate_citation(citation)
        if note:
            notes.append(f"{citation.law} {citation.article}: {note}")
    return notes


def flag_unverified_citations(
    citations: list[Citation] | tuple[Citation, ...],
    review_notes: list[str],
) -> list[str]:
    """Append a warning block listing unverified citations to the review notes."""
    unverified = validate_citations(citations)
    if not unverified:
        return list(review_notes)

    return [
        *review_notes,
        f"WARNING: {len(unverified)} citation(s) could not be verified "
        "against the known articles registry:",
        *(f"  - {note}" for note in unverified),
    ]
