"""Storage adapters behind the unit of work port: SQLAlchemy and in-memory."""
