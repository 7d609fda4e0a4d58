"""
engine/assembler.py — Report Assembler

Orders findings by severity, tallies them, and builds the immutable
ForensicReport.
"""
import secrets
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional

from engine.report import Finding, ForensicReport, PageAnalysis, Severity


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Stable sort by severity rank; emission order is kept within a tier."""
    return sorted(findings, key=lambda f: f.severity.rank)


def tally(findings: Iterable[Finding]) -> Dict[str, int]:
    """Count findings per severity. Every severity is present, zeros included."""
    counts = {sev.value: 0 for sev in Severity}
    for finding in findings:
        counts[finding.severity.value] += 1
    return counts


def assemble(
    *,
    filename: str,
    file_size: int,
    digests: Mapping[str, str],
    findings: Iterable[Finding],
    metadata: Mapping[str, str],
    page_count: int,
    eof_count: int,
    inconsistent_pages: Iterable[str] = (),
    report_id: Optional[str] = None,
    analyzed_at: Optional[str] = None,
) -> ForensicReport:
    ordered = sort_findings(findings)
    return ForensicReport(
        id=report_id or generate_id(),
        filename=filename,
        file_size=file_size,
        md5=digests["md5"],
        sha256=digests["sha256"],
        analyzed_at=analyzed_at or datetime.now(timezone.utc).isoformat(),
        page_count=page_count,
        findings=tuple(ordered),
        metadata=metadata,
        severity_counts=tally(ordered),
        revision_count=max(1, eof_count),
        page_analysis=PageAnalysis(page_count, tuple(inconsistent_pages)),
    )


def generate_id() -> str:
    return "FR-" + secrets.token_hex(4).upper()
