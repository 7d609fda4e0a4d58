"""blueprints — Flask blueprints for the forensics service."""
