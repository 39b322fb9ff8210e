"""Persistence: database session handling, ORM models, repositories, migrations."""
