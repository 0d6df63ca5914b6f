"""Page models for published pages and templates."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from pagepress.kernel.types import Document, PageRecord, SitemapEntry, Template


class Page(BaseModel):
    """
    Core page model. Represents a row in the pages table.

    Templates live in the same table with type="template" and a
    template_type of header, footer, notfound or custom.
    """

    id: str
    title: str = ""
    slug: str
    type: Literal["page", "post", "template"] = "page"
    template_type: str | None = None
    content_json: Any = None
    published: bool = False
    header_template_id: str | None = None
    footer_template_id: str | None = None
    updated_at: datetime | None = None

    def to_record(self) -> PageRecord:
        """The subset the composer reads, with contentJson parsed."""
        return PageRecord(
            id=self.id,
            title=self.title,
            slug=self.slug,
            content=Document.from_json(self.content_json),
            header_template_id=self.header_template_id,
            footer_template_id=self.footer_template_id,
            updated_at=self.updated_at,
        )

    def to_template(self) -> Template:
        return Template(
            id=self.id,
            template_type=self.template_type or "custom",
            document=Document.from_json(self.content_json),
            published=self.published,
            title=self.title,
        )

    def to_sitemap_entry(self) -> SitemapEntry:
        return SitemapEntry(
            slug=self.slug,
            updated_at=self.updated_at,
            published=self.published,
            page_type=self.type,
        )


class PageSettingsRow(BaseModel):
    """One row of page_settings: free-form JSON keyed by page id."""

    page_id: str
    settings: dict[str, Any] = Field(default_factory=dict)


class SiteSettingRow(BaseModel):
    """One row of site_settings: a key and its JSON value."""

    key: str
    value: Any = None
