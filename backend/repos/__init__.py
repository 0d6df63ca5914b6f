"""
Repository layer for PagePress.

All SQL lives here and ONLY here. No database access outside this module.
"""

from backend.repos.page_repo import PageRepo
from backend.repos.settings_repo import SettingsRepo

__all__ = [
    "PageRepo",
    "SettingsRepo",
]
