"""Configuration package for the grocery data core."""
from .settings import GrocerySettings, get_settings, clear_settings_cache

__all__ = ['GrocerySettings', 'get_settings', 'clear_settings_cache']
