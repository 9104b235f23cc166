"""Persistence: engine/session, table metadata, and repositories."""
