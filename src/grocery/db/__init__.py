"""Database access for the grocery data core."""
from .connection import DatabaseConnection, resolve_storage_location

__all__ = ['DatabaseConnection', 'resolve_storage_location']
