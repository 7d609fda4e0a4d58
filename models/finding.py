"""models/finding.py — SQLAlchemy model for individual forensic findings."""
import json

from extensions import db


class FindingRecord(db.Model):
    __tablename__ = "forensic_finding"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    report_id = db.Column(db.String(16), db.ForeignKey("forensic_report.id"), nullable=False)
    position = db.Column(db.Integer, nullable=False)   # index in the severity-sorted list
    severity = db.Column(db.String(16))  # 'critical' | 'high' | 'medium' | 'low' | 'info'
    category = db.Column(db.String(32))
    title = db.Column(db.String(255))
    detail = db.Column(db.Text)
    evidence_json = db.Column(db.Text)   # JSON array of bounded strings

    def to_dict(self):
        return {
            "severity": self.severity,
            "category": self.category,
            "title": self.title,
            "detail": self.detail,
            "evidence": json.loads(self.evidence_json) if self.evidence_json else [],
        }

    def __repr__(self):
        return f"<FindingRecord [{self.severity}] {self.title}>"
