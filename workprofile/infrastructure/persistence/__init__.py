"""Persistence: SQLAlchemy models, repositories and the transaction manager."""
