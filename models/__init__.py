"""models — SQLAlchemy records for stored forensic reports."""
