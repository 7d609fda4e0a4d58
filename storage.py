"""
storage.py — Append-only report store backed by Flask-SQLAlchemy.

put / get / list_by_association. Stored reports are never updated; a
second put with the same id is refused.
"""
import json
import logging
from typing import List, Optional

from engine.report import ForensicReport
from extensions import db
from models.finding import FindingRecord
from models.report import ReportRecord

logger = logging.getLogger(__name__)


class ReportStore:
    """Persistence boundary for assembled reports."""

    def put(self, report: ForensicReport, association: Optional[str] = None) -> None:
        if db.session.get(ReportRecord, report.id) is not None:
            raise ValueError(f"Report {report.id} is already stored")

        record = ReportRecord(
            id=report.id,
            matter_id=association,
            filename=report.filename,
            file_size=report.file_size,
            md5=report.md5,
            sha256=report.sha256,
            analyzed_at=report.analyzed_at,
            page_count=report.page_count,
            revision_count=report.revision_count,
            metadata_json=json.dumps(dict(report.metadata), ensure_ascii=False),
            severity_counts_json=json.dumps(dict(report.severity_counts)),
            page_analysis_json=json.dumps(report.page_analysis.to_dict(), ensure_ascii=False),
        )
        for position, finding in enumerate(report.findings):
            record.findings.append(FindingRecord(
                position=position,
                severity=finding.severity.value,
                category=finding.category,
                title=finding.title,
                detail=finding.detail,
                evidence_json=json.dumps(list(finding.evidence), ensure_ascii=False),
            ))

        db.session.add(record)
        db.session.commit()
        logger.info("Stored report %s (matter=%s)", report.id, association)

    def get(self, report_id: str) -> Optional[ForensicReport]:
        record = db.session.get(ReportRecord, report_id)
        if record is None:
            return None
        return ForensicReport.from_dict(record.to_dict())

    def list_by_association(self, key: str) -> List[ForensicReport]:
        records = (ReportRecord.query
                   .filter_by(matter_id=key)
                   .order_by(ReportRecord.analyzed_at.asc())
                   .all())
        return [ForensicReport.from_dict(r.to_dict()) for r in records]
