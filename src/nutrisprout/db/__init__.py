"""SQLite relational store."""

from nutrisprout.db.connection import DatabaseConnection

__all__ = ["DatabaseConnection"]
