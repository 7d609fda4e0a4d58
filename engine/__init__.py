"""
engine/__init__.py — ForensicEngine orchestrator.

Hashes the buffer, runs the extractor and every analyzer over the same
immutable bytes, and assembles the findings into a ForensicReport.
Once the bytes are in hand a report is always returned: analyzer
failures become findings instead of exceptions.
"""
import functools
import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Mapping, Optional

from engine import (
    assembler, census, content, extractor, fingerprint, hashing, pages, signatures, structure,
)
from engine.errors import BufferUnavailableError, ForensicError, InputRejectedError
from engine.report import Finding, ForensicReport, PageAnalysis, Severity

logger = logging.getLogger(__name__)

DEFAULT_MAX_ANALYSIS_BYTES = 50 * 1024 * 1024
MAX_ERROR_DETAIL_CHARS = 300

__all__ = [
    "ForensicEngine", "ForensicReport", "Finding", "PageAnalysis", "Severity",
    "ForensicError", "InputRejectedError", "BufferUnavailableError",
]


class ForensicEngine:
    """
    Runs every forensic module for a single PDF buffer.

    ``mismatch_check`` replaces the creator/producer comparison used by the
    Tool-Fingerprint Analyzer.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None,
                 mismatch_check: fingerprint.MismatchCheck = fingerprint.substring_mismatch):
        self.config = dict(config or {})
        self.mismatch_check = mismatch_check

    def analyze(self, buffer: bytes, filename: str, file_size: Optional[int] = None) -> ForensicReport:
        """
        Analyze ``buffer`` and return the assembled report.

        Raises BufferUnavailableError if there are no readable bytes and
        InputRejectedError if the buffer exceeds ``MAX_ANALYSIS_BYTES``.
        """
        data = _snapshot(buffer)
        limit = self.config.get("MAX_ANALYSIS_BYTES", DEFAULT_MAX_ANALYSIS_BYTES)
        if limit and len(data) > limit:
            raise InputRejectedError(f"{filename}: {len(data)} bytes exceeds the {limit} byte limit")

        report_id = assembler.generate_id()
        analyzed_at = datetime.now(timezone.utc).isoformat()
        digests = hashing.compute_digests(data)
        all_findings: List[Finding] = []

        extraction = self._run_module(report_id, "extractor", extractor.inspect, data, all_findings)
        metadata = extraction.get("metadata", {})
        logger.info("Extracted %d page(s), %d text chars for %s",
                    extraction.get("page_count", 0), len(extraction.get("text", "")), report_id)

        modules = [
            ("fingerprint", functools.partial(fingerprint.inspect, mismatch_check=self.mismatch_check),
             metadata),
            ("structure",   structure.inspect,   data),
            ("content",     content.inspect,     data),
            ("signatures",  signatures.inspect,  data),
            ("pages",       pages.inspect,       data),
            ("census",      census.inspect,      data),
        ]
        module_results: Dict[str, Dict[str, Any]] = {}
        for module_name, module_fn, subject in modules:
            module_results[module_name] = self._run_module(
                report_id, module_name, module_fn, subject, all_findings
            )

        geometry = module_results["pages"]
        page_count = geometry.get("total_pages") or extraction.get("page_count", 0)

        report = assembler.assemble(
            report_id=report_id,
            analyzed_at=analyzed_at,
            filename=filename,
            file_size=len(data) if file_size is None else file_size,
            digests=digests,
            findings=all_findings,
            metadata=metadata,
            page_count=page_count,
            eof_count=module_results["structure"].get("eof_count", 0),
            inconsistent_pages=geometry.get("inconsistent_pages", ()),
        )
        logger.info("Report %s for %s: %s", report.id, filename, dict(report.severity_counts))
        return report

    def analyze_file(self, path: str, filename: Optional[str] = None) -> ForensicReport:
        """Read ``path`` and analyze it. Read failures are fatal, not findings."""
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as exc:
            raise BufferUnavailableError(f"Cannot read {path}: {exc}") from exc
        return self.analyze(data, filename or path.rsplit("/", 1)[-1])

    def _run_module(self, report_id: str, module_name: str, module_fn, subject,
                    all_findings: List[Finding]) -> Dict[str, Any]:
        try:
            logger.info("Running module: %s for %s", module_name, report_id)
            result = module_fn(subject, self.config)
            all_findings.extend(result.get("findings", []))
            return result.get("module_data", {})
        except Exception as exc:
            logger.error("Module %s failed: %s", module_name, exc, exc_info=True)
            all_findings.append(Finding.create(
                Severity.INFO, module_name.title(), f"{module_name.title()} Module Error",
                str(exc)[:MAX_ERROR_DETAIL_CHARS], [],
            ))
            return {"error": str(exc)[:MAX_ERROR_DETAIL_CHARS]}


def _snapshot(buffer) -> bytes:
    if buffer is None or isinstance(buffer, int):
        raise BufferUnavailableError("No document bytes supplied")
    try:
        return bytes(buffer)
    except (TypeError, ValueError) as exc:
        raise BufferUnavailableError(f"Unreadable document buffer: {exc}") from exc
