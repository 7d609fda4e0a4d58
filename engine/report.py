"""
engine/report.py — Forensic report data model.

Severity ladder, individual findings, page analysis and the assembled
report. Everything here is immutable once built.
"""
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

EVIDENCE_MAX_CHARS = 500


@total_ordering
class Severity(Enum):
    """Triage rank. Declaration order is the sort order."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_RANKS = {sev: i for i, sev in enumerate(Severity)}


def _bounded(items: Iterable[Any], limit: int) -> Tuple[str, ...]:
    return tuple(str(item)[:limit] for item in items)


@dataclass(frozen=True)
class Finding:
    severity: Severity
    category: str
    title: str
    detail: str
    evidence: Tuple[str, ...] = ()

    @classmethod
    def create(cls, severity: Severity, category: str, title: str, detail: str,
               evidence: Iterable[Any] = (), max_chars: int = EVIDENCE_MAX_CHARS) -> "Finding":
        """Build a finding, truncating every evidence string to ``max_chars``."""
        return cls(severity, category, title, detail, _bounded(evidence, max_chars))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "category": self.category,
            "title": self.title,
            "detail": self.detail,
            "evidence": list(self.evidence),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Finding":
        return cls(
            Severity(data["severity"]),
            data.get("category", ""),
            data.get("title", ""),
            data.get("detail", ""),
            tuple(data.get("evidence") or ()),
        )


@dataclass(frozen=True)
class PageAnalysis:
    total_pages: int = 0
    inconsistent_pages: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "inconsistentPages": list(self.inconsistent_pages),
        }


@dataclass(frozen=True)
class ForensicReport:
    id: str
    filename: str
    file_size: int
    md5: str
    sha256: str
    analyzed_at: str
    page_count: int
    findings: Tuple[Finding, ...]
    metadata: Mapping[str, str]
    severity_counts: Mapping[str, int]
    revision_count: int
    page_analysis: PageAnalysis = field(default_factory=PageAnalysis)

    def __post_init__(self):
        # Freeze the mappings so callers cannot edit a delivered report.
        object.__setattr__(self, "findings", tuple(self.findings))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        object.__setattr__(self, "severity_counts", MappingProxyType(dict(self.severity_counts)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "fileSize": self.file_size,
            "md5": self.md5,
            "sha256": self.sha256,
            "analyzedAt": self.analyzed_at,
            "pageCount": self.page_count,
            "findings": [f.to_dict() for f in self.findings],
            "metadata": dict(self.metadata),
            "severityCounts": dict(self.severity_counts),
            "revisionCount": self.revision_count,
            "pageAnalysis": self.page_analysis.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ForensicReport":
        pages = data.get("pageAnalysis") or {}
        return cls(
            id=data["id"],
            filename=data.get("filename", ""),
            file_size=int(data.get("fileSize", 0)),
            md5=data.get("md5", ""),
            sha256=data.get("sha256", ""),
            analyzed_at=data.get("analyzedAt", ""),
            page_count=int(data.get("pageCount", 0)),
            findings=tuple(Finding.from_dict(f) for f in data.get("findings", [])),
            metadata=data.get("metadata") or {},
            severity_counts=data.get("severityCounts") or {},
            revision_count=int(data.get("revisionCount", 1)),
            page_analysis=PageAnalysis(
                int(pages.get("totalPages", 0)),
                tuple(pages.get("inconsistentPages", ())),
            ),
        )

    def __repr__(self):
        return f"<ForensicReport {self.id} findings={len(self.findings)} file={self.filename}>"
