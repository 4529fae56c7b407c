from __future__ import annotations

import logging
from types import MappingProxyType

from pdf_extract import group_into_lines
from pdf_models import MunicipalityStats, RowData, SectionTwoRow, SectionWithChange

logger = logging.getLogger(__name__)

# Section labels in the order they are printed on every page.
KNOWN_SECTIONS = (
    "Filings",
    "Resolutions",
    "Clearance",
    "Clearance Percent",
    "Backlog",
    "Backlog/100 Mthly Filings",
    "Backlog Percent",
    "Active Pending",
)

# Labels used by older reports for the same sections.
SECTION_ALIASES = MappingProxyType({
    "Terminations": "Resolutions",
    "Backlog/100 Monthly Filings": "Backlog/100 Mthly Filings",
})

TITLE_MARKER = "MUNICIPAL COURT"
ROW_WIDTH = 10
PAD_VALUE = "- -"

# Merge priorities for a candidate (left, right) pair.
_PRIORITY_LEADING_ZERO = 3
_PRIORITY_ONE_DIGIT = 2
_PRIORITY_TWO_DIGITS = 1
_PRIORITY_OTHER = 0

_ASCII_DIGITS = frozenset("0123456789")


class PageParseError(ValueError):
    """The page does not follow the fixed report layout."""


def _compact(text: str) -> str:
    return text.replace(" ", "")


_COMPACT_SECTIONS = {_compact(name): name for name in KNOWN_SECTIONS}
_COMPACT_ALIASES = {_compact(alias): name for alias, name in SECTION_ALIASES.items()}


def match_section_name(line: list[str]) -> str:
    """Return the canonical section named by *line*, or "" if it names none.

    Spaces are ignored so kerning splits such as ``["F", "ilings"]`` or
    ``["Clearance", "Percent"]`` still match.
    """
    compact = _compact(" ".join(line))
    if compact in _COMPACT_SECTIONS:
        return _COMPACT_SECTIONS[compact]
    return _COMPACT_ALIASES.get(compact, "")


# ---------------------------------------------------------------------------
# Number repair
# ---------------------------------------------------------------------------

def _is_digits(text: str) -> bool:
    return bool(text) and all(c in _ASCII_DIGITS for c in text)


def _is_three_digits(text: str) -> bool:
    return len(text) == 3 and _is_digits(text)


def looks_like_comma_split(left: str, right: str) -> bool:
    """True if *left* and *right* look like halves of one comma-grouped number.

    *right* must be exactly three digits. *left* must end in a digit and be
    either an already-merged value whose last group has three digits, or a
    one- or two-digit number with an optional minus sign. Three-digit left
    values are never merged since neighbouring columns often hold them.
    """
    if not _is_three_digits(right):
        return False
    if not left or left[-1] not in _ASCII_DIGITS:
        return False
    if "," in left:
        return _is_three_digits(left.rsplit(",", 1)[1])
    stripped = left[1:] if left.startswith("-") else left
    return 1 <= len(stripped) <= 2 and _is_digits(stripped)


def _merge_priority(left: str, right: str) -> int:
    if right.startswith("0"):
        return _PRIORITY_LEADING_ZERO
    digits = left[1:] if left.startswith("-") else left
    digits = digits.rsplit(",", 1)[-1]
    if len(digits) == 1:
        return _PRIORITY_ONE_DIGIT
    if len(digits) == 2:
        return _PRIORITY_TWO_DIGITS
    return _PRIORITY_OTHER


def merge_comma_split_numbers(line: list[str], expected_len: int) -> list[str]:
    """Rejoin numbers that large kerning split at their thousands separator.

    Only runs while *line* is longer than *expected_len*. Each pass merges the
    single best candidate pair (highest priority, earliest on ties) and then
    re-checks the length; it stops when no candidate remains.
    """
    line = list(line)
    while len(line) > expected_len:
        best_idx = -1
        best_priority = -1
        for i in range(len(line) - 1):
            if not looks_like_comma_split(line[i], line[i + 1]):
                continue
            priority = _merge_priority(line[i], line[i + 1])
            if priority > best_priority:
                best_priority = priority
                best_idx = i

        if best_idx < 0:
            break

        merged = f"{line[best_idx]},{line[best_idx + 1]}"
        line[best_idx:best_idx + 2] = [merged]
    return line


# ---------------------------------------------------------------------------
# Table mapping
# ---------------------------------------------------------------------------

class PageCursor:
    """Forward-only reader over the lines of one page."""

    def __init__(self, lines: list[list[str]]):
        self.lines = lines
        self.pos = 0

    def peek(self) -> list[str] | None:
        if self.pos >= len(self.lines):
            return None
        return self.lines[self.pos]

    def next_line(self, context: str) -> list[str]:
        if self.pos >= len(self.lines):
            raise PageParseError(f"{context}: unexpected end of lines at line {self.pos}")
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def read_joined(self, context: str) -> str:
        return " ".join(self.next_line(context))

    def skip_to_section(self) -> None:
        """Advance past column-header lines to the first section label."""
        while self.pos < len(self.lines):
            if match_section_name(self.lines[self.pos]):
                return
            self.pos += 1

    def read_section_name(self, expected: str) -> None:
        line = self.next_line(f"reading section name for {expected!r}")
        got = match_section_name(line) or " ".join(line)
        if got != expected:
            raise PageParseError(f"expected section {expected!r}, got {got!r}")

    def read_row(self, section: str) -> RowData:
        line = self.next_line(f"section {section!r}: reading data row")
        fields = merge_comma_split_numbers(line, ROW_WIDTH)
        if not fields:
            raise PageParseError(f"section {section!r}: empty data row")
        if len(fields) < ROW_WIDTH:
            # statewide summary pages print fewer columns
            fields = fields + [PAD_VALUE] * (ROW_WIDTH - len(fields))
        elif len(fields) > ROW_WIDTH:
            logger.warning(
                "section %r: row %r has %d fields after merging, dropping %r",
                section, fields[0], len(fields), fields[ROW_WIDTH:],
            )
            fields = fields[:ROW_WIDTH]
        return RowData.from_fields(fields)

    def read_section_with_change(self, name: str) -> SectionWithChange:
        self.read_section_name(name)
        return SectionWithChange(
            prior_period=self.read_row(name),
            current_period=self.read_row(name),
            pct_change=self.read_row(name),
        )

    def read_section_two_row(self, name: str) -> SectionTwoRow:
        self.read_section_name(name)
        return SectionTwoRow(
            prior_period=self.read_row(name),
            current_period=self.read_row(name),
        )


def parse_lines(lines: list[list[str]]) -> MunicipalityStats:
    """Map grouped lines of one page onto the fixed eight-section table."""
    cursor = PageCursor(lines)

    title = cursor.read_joined("reading title")
    if TITLE_MARKER not in title:
        raise PageParseError(f"expected title containing {TITLE_MARKER!r}, got {title!r}")
    date_range = cursor.read_joined("reading date range")
    county = cursor.read_joined("reading county")
    municipality = cursor.read_joined("reading municipality")

    cursor.skip_to_section()

    filings = cursor.read_section_with_change("Filings")
    resolutions = cursor.read_section_with_change("Resolutions")
    clearance = cursor.read_section_two_row("Clearance")
    clearance_pct = cursor.read_section_two_row("Clearance Percent")
    backlog = cursor.read_section_with_change("Backlog")
    backlog_per_100 = cursor.read_section_with_change("Backlog/100 Mthly Filings")
    backlog_pct = cursor.read_section_two_row("Backlog Percent")
    active_pending = cursor.read_section_with_change("Active Pending")

    return MunicipalityStats(
        county=county,
        municipality=municipality,
        date_range=date_range,
        filings=filings,
        resolutions=resolutions,
        clearance=clearance,
        clearance_pct=clearance_pct,
        backlog=backlog,
        backlog_per_100=backlog_per_100,
        backlog_pct=backlog_pct,
        active_pending=active_pending,
    )


def parse_page(items: list[str]) -> MunicipalityStats:
    """Parse the text fragments of one page into a MunicipalityStats record."""
    return parse_lines(group_into_lines(items))
