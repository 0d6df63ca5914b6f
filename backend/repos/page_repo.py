"""Repository for page and template reads."""

from __future__ import annotations

import asyncpg

from backend.db import snapshot_conn
from backend.models.page import Page

_COLUMNS = """
    id::text AS id, title, slug, type, template_type, content_json, published,
    header_template_id::text AS header_template_id,
    footer_template_id::text AS footer_template_id,
    updated_at
"""


def _row_to_page(row: asyncpg.Record) -> Page:
    """Convert a database row to a Page model."""
    return Page(
        id=row["id"],
        title=row["title"] or "",
        slug=row["slug"],
        type=row["type"],
        template_type=row["template_type"],
        content_json=row["content_json"],
        published=row["published"],
        header_template_id=row["header_template_id"],
        footer_template_id=row["footer_template_id"],
        updated_at=row["updated_at"],
    )


class PageRepo:
    """Read-only page and template queries for the public site."""

    async def get_published_by_slug(self, slug: str) -> Page | None:
        """
        Get a published, non-template page by exact slug.

        Returns:
            Page if found, None otherwise
        """
        async with snapshot_conn() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_COLUMNS} FROM pages
                WHERE slug = $1 AND published AND type = 'page'
                LIMIT 1
                """,
                slug,
            )
            return _row_to_page(row) if row else None

    async def get_template(self, template_id: str) -> Page | None:
        """
        Get a template by ID, published or not.
        Used for a page's own header/footer template.
        """
        async with snapshot_conn() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_COLUMNS} FROM pages
                WHERE id::text = $1 AND type = 'template'
                LIMIT 1
                """,
                template_id,
            )
            return _row_to_page(row) if row else None

    async def get_system_template(self, template_type: str) -> Page | None:
        """
        Get the published system template of one type (header, footer, notfound).

        At most one is expected; the most recently updated wins if not.
        """
        async with snapshot_conn() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_COLUMNS} FROM pages
                WHERE type = 'template' AND template_type = $1 AND published
                ORDER BY updated_at DESC
                LIMIT 1
                """,
                template_type,
            )
            return _row_to_page(row) if row else None

    async def list_published_pages(self) -> list[Page]:
        """All published, non-template pages, ordered by slug."""
        async with snapshot_conn() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_COLUMNS} FROM pages
                WHERE published AND type = 'page'
                ORDER BY slug
                """
            )
            return [_row_to_page(row) for row in rows]
