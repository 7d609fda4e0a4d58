"""
blueprints/api/routes.py — REST API endpoints for the PDF tamper-forensics service.

Routes:
    POST  /api/v1/analyze
    GET   /api/v1/reports/<id>
    GET   /api/v1/matters/<matter_id>/reports
    GET   /api/v1/health
"""
import logging

from flask import current_app, request, jsonify
from werkzeug.utils import secure_filename

from blueprints.api import api_bp
from engine import ForensicEngine, ForensicError, InputRejectedError
from extensions import limiter
from storage import ReportStore

logger = logging.getLogger(__name__)

ALLOWED_MIME = {"application/pdf"}
PDF_MAGIC = b"%PDF-"
MAGIC_WINDOW = 1024


# ── Helper: validate + read upload ─────────────────────────────────────────────

def _validate_and_read(file_storage) -> tuple[str, bytes]:
    """
    Validate type and read a FileStorage into memory.
    Returns (safe_filename, buffer).
    Raises ValueError on invalid input.
    """
    safe_name = secure_filename(file_storage.filename or "upload.pdf") or "upload.pdf"
    if file_storage.mimetype not in ALLOWED_MIME and not safe_name.lower().endswith(".pdf"):
        raise ValueError("Only PDF files are allowed")

    buffer = file_storage.read()

    # Magic bytes check (%PDF- may follow a short preamble)
    if PDF_MAGIC not in buffer[:MAGIC_WINDOW]:
        raise ValueError("File does not contain PDF magic bytes (%PDF-)")

    return safe_name, buffer


# ── Routes ──────────────────────────────────────────────────────────────────────

@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": current_app.config.get("VERSION", "1.0.0")}), 200


@api_bp.route("/analyze", methods=["POST"])
@limiter.limit(lambda: current_app.config.get("RATE_LIMIT", "60 per minute"))
def analyze():
    """POST /api/v1/analyze — analyze a single uploaded PDF, optionally filed under a matter."""
    if "file" not in request.files:
        return jsonify({"error": "No file provided. Include 'file' in multipart form."}), 400

    matter_id = request.form.get("matterId") or None

    try:
        safe_name, buffer = _validate_and_read(request.files["file"])
    except ValueError as e:
        return jsonify({"error": str(e)}), 415
    except OSError as e:
        logger.error("Upload unreadable: %s", e, exc_info=True)
        return jsonify({"error": "Uploaded file could not be read", "detail": str(e)}), 500

    try:
        report = ForensicEngine(current_app.config).analyze(buffer, safe_name, len(buffer))
        ReportStore().put(report, association=matter_id)
        return jsonify(report.to_dict()), 200
    except InputRejectedError as e:
        return jsonify({"error": str(e)}), 413
    except ForensicError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error("Analysis error: %s", e, exc_info=True)
        return jsonify({"error": "Internal analysis error", "detail": str(e)}), 500


@api_bp.route("/reports/<report_id>", methods=["GET"])
def get_report(report_id: str):
    """GET /api/v1/reports/<id> — retrieve a stored report."""
    report = ReportStore().get(report_id)
    if report is None:
        return jsonify({"error": "Report not found"}), 404
    return jsonify(report.to_dict()), 200


@api_bp.route("/matters/<matter_id>/reports", methods=["GET"])
def matter_reports(matter_id: str):
    """GET /api/v1/matters/<matter_id>/reports — every report filed under a matter."""
    reports = ReportStore().list_by_association(matter_id)
    return jsonify([r.to_dict() for r in reports]), 200
