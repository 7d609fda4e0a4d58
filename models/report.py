"""models/report.py — SQLAlchemy model for stored forensic reports."""
import json

from extensions import db


class ReportRecord(db.Model):
    __tablename__ = "forensic_report"

    id = db.Column(db.String(16), primary_key=True)          # e.g. 'FR-A3F8B21C'
    matter_id = db.Column(db.String(64), index=True)          # association key, optional
    filename = db.Column(db.String(255))
    file_size = db.Column(db.Integer)
    md5 = db.Column(db.String(32))
    sha256 = db.Column(db.String(64), index=True, nullable=False)
    analyzed_at = db.Column(db.String(40), index=True)       # ISO-8601, as reported
    page_count = db.Column(db.Integer, default=0)
    revision_count = db.Column(db.Integer, default=1)

    # JSON snapshots (stored as Text)
    metadata_json = db.Column(db.Text)
    severity_counts_json = db.Column(db.Text)
    page_analysis_json = db.Column(db.Text)

    findings = db.relationship("FindingRecord", backref="report", lazy=True,
                               order_by="FindingRecord.position",
                               cascade="all, delete-orphan")

    def to_dict(self):
        def _load(field, default):
            try:
                return json.loads(field) if field else default
            except ValueError:
                return default

        return {
            "id": self.id,
            "filename": self.filename,
            "fileSize": self.file_size,
            "md5": self.md5,
            "sha256": self.sha256,
            "analyzedAt": self.analyzed_at,
            "pageCount": self.page_count,
            "findings": [f.to_dict() for f in self.findings],
            "metadata": _load(self.metadata_json, {}),
            "severityCounts": _load(self.severity_counts_json, {}),
            "revisionCount": self.revision_count,
            "pageAnalysis": _load(self.page_analysis_json,
                                  {"totalPages": self.page_count, "inconsistentPages": []}),
        }

    def __repr__(self):
        return f"<ReportRecord {self.id} matter={self.matter_id} file={self.filename}>"
