"""
app.py — Flask Application Factory for the PDF tamper-forensics service.
"""
import os
import logging

from flask import Flask, jsonify
from flask_cors import CORS
from pythonjsonlogger import jsonlogger

from config import config_map
from extensions import db, limiter

# ── Logging ────────────────────────────────────────────────────────────────────
handler = logging.StreamHandler()
handler.setFormatter(jsonlogger.JsonFormatter(
    "%(asctime)s %(levelname)s %(name)s %(message)s"
))
logging.basicConfig(level=logging.INFO, handlers=[handler])

logger = logging.getLogger(__name__)


def create_app(env: str = None) -> Flask:
    """Application factory."""
    env = env or os.environ.get("FLASK_ENV", "development")
    cfg = config_map.get(env, config_map["default"])

    app = Flask(__name__)
    app.config.from_object(cfg)

    # ── Ensure the SQLite data directory exists ───────────────────────────────
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") \
            and ":memory:" not in app.config["SQLALCHEMY_DATABASE_URI"]:
        os.makedirs(os.path.join(os.path.dirname(__file__), "data"), exist_ok=True)

    # ── Extensions ────────────────────────────────────────────────────────────
    db.init_app(app)
    CORS(app, origins="same-origin")
    limiter.init_app(app)

    # ── Blueprints ────────────────────────────────────────────────────────────
    from blueprints.api import api_bp
    app.register_blueprint(api_bp, url_prefix="/api/v1")

    @app.errorhandler(413)
    def too_large(_err):
        limit_mb = app.config.get("MAX_UPLOAD_MB")
        return jsonify({"error": f"File exceeds the {limit_mb} MB upload limit"}), 413

    # ── DB init ───────────────────────────────────────────────────────────────
    with app.app_context():
        import models.report  # noqa: F401
        import models.finding  # noqa: F401
        db.create_all()
        logger.info("Database tables created / verified.")

    logger.info("PDF forensics app created [env=%s]", env)
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
