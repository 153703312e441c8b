"""Persistence: SQLite-backed asset store (engine, models, repositories)."""
