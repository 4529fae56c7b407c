from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    ARRAY = "array"


@dataclass(frozen=True)
class PdfToken:
    """One lexical item from a page content stream."""

    kind: TokenKind
    value: str = ""
    children: tuple[PdfToken, ...] = ()


@dataclass(frozen=True)
class RowData:
    """One table row: a label plus nine column values.

    Values stay strings because the report prints "%", "- -", commas and
    leading minus signs.
    """

    label: str
    indictables: str
    dp_and_pdp: str
    other_criminal: str
    criminal_total: str
    dwi: str
    traffic_moving: str
    parking: str
    traffic_total: str
    grand_total: str

    @classmethod
    def from_fields(cls, fields: list[str]) -> RowData:
        if len(fields) != len(ROW_JSON_KEYS):
            raise ValueError(f"row needs {len(ROW_JSON_KEYS)} fields, got {len(fields)}")
        return cls(*fields)

    def values(self) -> list[str]:
        return [
            self.label,
            self.indictables,
            self.dp_and_pdp,
            self.other_criminal,
            self.criminal_total,
            self.dwi,
            self.traffic_moving,
            self.parking,
            self.traffic_total,
            self.grand_total,
        ]

    def to_dict(self) -> dict[str, str]:
        return dict(zip(ROW_JSON_KEYS, self.values()))


ROW_JSON_KEYS = (
    "label",
    "indictables",
    "dpAndPdp",
    "otherCriminal",
    "criminalTotal",
    "dwi",
    "trafficMoving",
    "parking",
    "trafficTotal",
    "grandTotal",
)


@dataclass(frozen=True)
class SectionWithChange:
    """Three sub-rows: prior period, current period, percent change."""

    prior_period: RowData
    current_period: RowData
    pct_change: RowData

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {
            "priorPeriod": self.prior_period.to_dict(),
            "currentPeriod": self.current_period.to_dict(),
            "pctChange": self.pct_change.to_dict(),
        }


@dataclass(frozen=True)
class SectionTwoRow:
    """Two sub-rows: prior period and current period."""

    prior_period: RowData
    current_period: RowData

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {
            "priorPeriod": self.prior_period.to_dict(),
            "currentPeriod": self.current_period.to_dict(),
        }


@dataclass(frozen=True)
class MunicipalityStats:
    """All statistics printed on a single municipality page."""

    county: str
    municipality: str
    date_range: str
    filings: SectionWithChange
    resolutions: SectionWithChange
    clearance: SectionTwoRow
    clearance_pct: SectionTwoRow
    backlog: SectionWithChange
    backlog_per_100: SectionWithChange
    backlog_pct: SectionTwoRow
    active_pending: SectionWithChange

    def to_dict(self) -> dict:
        return {
            "county": self.county,
            "municipality": self.municipality,
            "dateRange": self.date_range,
            "filings": self.filings.to_dict(),
            "resolutions": self.resolutions.to_dict(),
            "clearance": self.clearance.to_dict(),
            "clearancePercent": self.clearance_pct.to_dict(),
            "backlog": self.backlog.to_dict(),
            "backlogPer100MthlyFilings": self.backlog_per_100.to_dict(),
            "backlogPercent": self.backlog_pct.to_dict(),
            "activePending": self.active_pending.to_dict(),
        }


@dataclass
class PageResult:
    """Outcome of parsing one page: a record or an error message."""

    page_number: int
    stats: MunicipalityStats | None = None
    error: str | None = None


@dataclass
class DocumentResult:
    """Per-document tally of parsed pages."""

    pages: int
    results: list[PageResult] = field(default_factory=list)

    @property
    def records(self) -> list[MunicipalityStats]:
        return [r.stats for r in self.results if r.stats is not None]

    @property
    def errors(self) -> list[str]:
        return [f"page {r.page_number}: {r.error}" for r in self.results if r.error is not None]
