"""
Pydantic models for PagePress.

All data shapes defined here. No imports from db, repos, or routes.
"""

from backend.models.page import Page, PageSettingsRow, SiteSettingRow

__all__ = [
    "Page",
    "PageSettingsRow",
    "SiteSettingRow",
]
