"""Repository for site-wide and per-page settings."""

from __future__ import annotations

import asyncpg

from backend.db import snapshot_conn
from backend.models.page import PageSettingsRow, SiteSettingRow


def _row_to_site_setting(row: asyncpg.Record) -> SiteSettingRow:
    return SiteSettingRow(key=row["key"], value=row["value"])


def _row_to_page_settings(row: asyncpg.Record) -> PageSettingsRow:
    settings = row["settings"]
    return PageSettingsRow(
        page_id=row["page_id"],
        settings=settings if isinstance(settings, dict) else {},
    )


class SettingsRepo:
    """Read-only settings queries."""

    async def list_site_settings(self) -> list[SiteSettingRow]:
        async with snapshot_conn() as conn:
            rows = await conn.fetch("SELECT key, value FROM site_settings ORDER BY key")
            return [_row_to_site_setting(row) for row in rows]

    async def get_site_settings(self) -> dict[str, object]:
        """
        The flat key → JSON value map.

        Returns:
            Mapping of every stored key to its decoded value
        """
        return {row.key: row.value for row in await self.list_site_settings()}

    async def get_page_settings(self, page_id: str) -> PageSettingsRow | None:
        """
        Get the settings row for one page.

        Returns:
            PageSettingsRow if the page has settings, None otherwise
        """
        async with snapshot_conn() as conn:
            row = await conn.fetchrow(
                "SELECT page_id::text AS page_id, settings FROM page_settings WHERE page_id::text = $1",
                page_id,
            )
            return _row_to_page_settings(row) if row else None
