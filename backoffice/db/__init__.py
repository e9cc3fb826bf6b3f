"""SQL backend (SQLAlchemy engine, session and the records table)."""
