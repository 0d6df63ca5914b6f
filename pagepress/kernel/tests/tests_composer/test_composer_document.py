"""
PagePress Composer -- Full Document Tests

compose_page(context) → one complete HTML document:
  - head: charset, viewport, title, SEO + social meta, one <style>, head code
  - body: header, <main>page</main>, footer, footer code, page script
  - CSS order: base → page → header → footer → page custom CSS
  - header/footer resolve page template id → published system template → omitted

compose_404(context) uses the published system templates only.
"""

from pagepress.kernel.composer import (
    BASE_CSS,
    NOT_FOUND_MESSAGE,
    build_head_tags,
    compose_404,
    compose_page,
    page_title,
    resolve_template,
)
from pagepress.kernel.types import (
    Document,
    NotFoundRenderContext,
    PageRecord,
    PageRenderContext,
    PageSettings,
    SiteSettings,
    Template,
    TemplateLibrary,
)

# ============================================================================
# Helpers
# ============================================================================


def doc_with(*nodes):
    """ROOT plus one node per (id, typeTag, props) triple, in order."""
    content = {"ROOT": {"typeTag": "Container", "childIds": [n[0] for n in nodes]}}
    for node_id, type_tag, props in nodes:
        content[node_id] = {"typeTag": type_tag, "props": props}
    return Document.from_json(content)


def template(template_id, template_type, *nodes, published=True):
    return Template(id=template_id, template_type=template_type, document=doc_with(*nodes), published=published)


def make_page(**overrides):
    defaults = {
        "id": "p1",
        "title": "About",
        "slug": "about",
        "content": doc_with(("a", "Heading", {"text": "About us", "advancedStyling": {"color": "red"}})),
    }
    defaults.update(overrides)
    return PageRecord(**defaults)


def make_context(page=None, page_settings=None, site=None, templates=()):
    return PageRenderContext(
        page=page or make_page(),
        page_settings=page_settings or PageSettings(),
        site_settings=site or SiteSettings(title="Acme", url="https://acme.test/"),
        templates=TemplateLibrary.of(*templates),
    )


def assert_contains(html: str, *fragments: str) -> None:
    for fragment in fragments:
        assert fragment in html, f"Expected {fragment!r} in document"


def assert_not_contains(html: str, *fragments: str) -> None:
    for fragment in fragments:
        assert fragment not in html, f"Did not expect {fragment!r} in document"


def assert_order(html: str, *fragments: str) -> None:
    positions = [html.index(f) for f in fragments]
    assert positions == sorted(positions), f"Out of order: {fragments}"


SYSTEM_HEADER = template("h-sys", "header", ("n", "Text", {"text": "System header"}))
SYSTEM_FOOTER = template("f-sys", "footer", ("n", "Text", {"text": "System footer"}))


# ============================================================================
# Document shape
# ============================================================================


class TestDocumentShape:
    def test_single_complete_document(self):
        html = compose_page(make_context())

        assert html.startswith("<!DOCTYPE html>\n<html lang=\"en\">")
        assert html.rstrip().endswith("</html>")
        assert html.count("<style>") == 1
        assert_contains(html, "<main><h2 id=\"pp-a\">About us</h2></main>")

    def test_page_css_after_base(self):
        html = compose_page(make_context())
        assert_order(html, BASE_CSS, "#pp-a { color: red; }")

    def test_body_class(self):
        html = compose_page(make_context(page_settings=PageSettings(custom_body_class='landing "x"')))
        assert_contains(html, '<body class="landing &quot;x&quot;">')

    def test_no_body_class(self):
        assert_contains(compose_page(make_context()), "<body>\n")

    def test_deterministic(self):
        context = make_context(templates=[SYSTEM_HEADER, SYSTEM_FOOTER])
        assert compose_page(context) == compose_page(context)


# ============================================================================
# Header and footer
# ============================================================================


class TestFrame:
    def test_system_templates_used_by_default(self):
        html = compose_page(make_context(templates=[SYSTEM_HEADER, SYSTEM_FOOTER]))
        assert_order(html, "System header", "<main>", "System footer")

    def test_page_specific_template_wins(self):
        custom = template("h-custom", "header", ("n", "Text", {"text": "Custom header"}))
        page = make_page(header_template_id="h-custom")
        html = compose_page(make_context(page=page, templates=[SYSTEM_HEADER, custom]))

        assert_contains(html, "Custom header")
        assert_not_contains(html, "System header")

    def test_missing_template_id_falls_back_to_system(self):
        page = make_page(footer_template_id="gone")
        html = compose_page(make_context(page=page, templates=[SYSTEM_FOOTER]))
        assert_contains(html, "System footer")

    def test_no_templates_leaves_no_stray_wrappers(self):
        html = compose_page(make_context())
        assert_contains(html, "<body>\n  <main>")
        assert_contains(html, "</main>\n</body>")
        assert_not_contains(html, "<header", "<footer")

    def test_unpublished_system_template_omitted(self):
        draft = template("h-draft", "header", ("n", "Text", {"text": "Draft header"}), published=False)
        html = compose_page(make_context(templates=[draft]))
        assert_not_contains(html, "Draft header")

    def test_disabled_header_and_footer(self):
        settings = PageSettings(disable_header=True, disable_footer=True)
        html = compose_page(make_context(page_settings=settings, templates=[SYSTEM_HEADER, SYSTEM_FOOTER]))
        assert_not_contains(html, "System header", "System footer")

    def test_ids_unique_across_page_and_frame(self):
        header = template("h", "header", ("a", "Heading", {"text": "Top", "advancedStyling": {"color": "blue"}}))
        html = compose_page(make_context(templates=[header]))

        assert_contains(html, '<h2 id="pp-a">About us</h2>', '<h2 id="pp-a-2">Top</h2>')
        assert_contains(html, "#pp-a { color: red; }", "#pp-a-2 { color: blue; }")

    def test_css_order(self):
        header = template("h", "header", ("hd", "Heading", {"text": "H", "advancedStyling": {"color": "blue"}}))
        footer = template("f", "footer", ("ft", "Heading", {"text": "F", "advancedStyling": {"color": "green"}}))
        settings = PageSettings(custom_css=".custom { color: pink; }")
        html = compose_page(make_context(page_settings=settings, templates=[header, footer]))

        assert_order(
            html,
            "/* PagePress Base Styles */",
            "#pp-a { color: red; }",
            "#pp-hd { color: blue; }",
            "#pp-ft { color: green; }",
            ".custom { color: pink; }",
        )

    def test_resolve_template(self):
        library = TemplateLibrary.of(SYSTEM_HEADER)
        assert resolve_template(library, None, "header") is SYSTEM_HEADER
        assert resolve_template(library, "missing", "header") is SYSTEM_HEADER
        assert resolve_template(library, None, "footer") is None


# ============================================================================
# Head
# ============================================================================


class TestHead:
    def test_title_precedence(self):
        assert page_title(make_context(page_settings=PageSettings(meta_title="Meta"))) == "Meta"
        assert page_title(make_context()) == "About"
        assert page_title(make_context(page=make_page(title=""))) == "Acme"

    def test_head_tag_order(self):
        settings = PageSettings(meta_description="Desc", og_image="https://acme.test/og.png", no_index=True)
        site = SiteSettings(title="Acme", url="https://acme.test", favicon_url="/favicon.ico")
        tags = build_head_tags(make_context(page_settings=settings, site=site))

        assert tags == [
            '<meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
            "<title>About</title>",
            '<meta name="description" content="Desc">',
            '<link rel="canonical" href="https://acme.test/about">',
            '<link rel="icon" href="/favicon.ico">',
            '<meta property="og:title" content="About">',
            '<meta property="og:description" content="Desc">',
            '<meta property="og:image" content="https://acme.test/og.png">',
            '<meta property="og:url" content="https://acme.test/about">',
            '<meta property="og:type" content="website">',
            '<meta property="og:site_name" content="Acme">',
            '<meta name="robots" content="noindex">',
            '<meta name="twitter:card" content="summary_large_image">',
        ]

    def test_homepage_canonical_is_site_root(self):
        page = make_page(slug="home")
        tags = build_head_tags(make_context(page=page))
        assert '<link rel="canonical" href="https://acme.test/">' in tags

    def test_no_site_url_no_canonical(self):
        tags = build_head_tags(make_context(site=SiteSettings(title="Acme")))
        assert not any("canonical" in tag or "og:url" in tag for tag in tags)

    def test_site_description_fallback(self):
        site = SiteSettings(title="Acme", description="Site desc")
        assert '<meta name="description" content="Site desc">' in build_head_tags(make_context(site=site))

    def test_values_escaped(self):
        page = make_page(title='</title><script>alert(1)</script>')
        html = compose_page(make_context(page=page))
        assert_not_contains(html, "<script>alert(1)</script>")
        assert_contains(html, "<title>&lt;/title&gt;&lt;script&gt;")

    def test_javascript_og_image_dropped(self):
        tags = build_head_tags(make_context(page_settings=PageSettings(og_image="javascript:alert(1)")))
        assert not any("og:image" in tag for tag in tags)

    def test_noindex_nofollow(self):
        tags = build_head_tags(make_context(page_settings=PageSettings(no_index=True, no_follow=True)))
        assert '<meta name="robots" content="noindex, nofollow">' in tags


# ============================================================================
# Custom code
# ============================================================================


class TestCustomCode:
    def test_site_head_code_in_head(self):
        site = SiteSettings(title="Acme", head_code='<meta name="verify" content="abc">')
        html = compose_page(make_context(site=site))
        assert_order(html, '<meta name="verify" content="abc">', "</head>")

    def test_site_footer_code_after_footer(self):
        site = SiteSettings(title="Acme", footer_code='<div id="chat"></div>')
        html = compose_page(make_context(site=site, templates=[SYSTEM_FOOTER]))
        assert_order(html, "System footer", '<div id="chat"></div>', "</body>")

    def test_page_scripts(self):
        settings = PageSettings(js_head="window.a = 1;", js_body="window.b = 2;")
        html = compose_page(make_context(page_settings=settings))

        assert_order(html, "<script>window.a = 1;</script>", "</head>", "<script>window.b = 2;</script>", "</body>")

    def test_page_custom_css_cannot_close_style(self):
        settings = PageSettings(custom_css="</style><script>alert(1)</script>")
        html = compose_page(make_context(page_settings=settings))
        assert html.count("</style>") == 1


# ============================================================================
# 404
# ============================================================================


class TestNotFound:
    def test_default_body(self):
        html = compose_404(NotFoundRenderContext(site_settings=SiteSettings(title="Acme")))

        assert_contains(html, "<title>404 - Acme</title>", '<meta name="robots" content="noindex, nofollow">')
        assert_contains(html, ">404</h1>", "doesn't exist", 'href="/"', "Go Home")
        assert NOT_FOUND_MESSAGE.startswith("The page")

    def test_notfound_template_replaces_default(self):
        notfound = template("nf", "notfound", ("x", "Heading", {"text": "Lost?", "advancedStyling": {"color": "red"}}))
        html = compose_404(NotFoundRenderContext(templates=TemplateLibrary.of(notfound)))

        assert_contains(html, '<main><h2 id="pp-x">Lost?</h2></main>', "#pp-x { color: red; }")
        assert_not_contains(html, "Go Home")

    def test_uses_system_header_and_footer(self):
        html = compose_404(NotFoundRenderContext(templates=TemplateLibrary.of(SYSTEM_HEADER, SYSTEM_FOOTER)))
        assert_order(html, "System header", "<main>", "System footer")

    def test_default_site_title(self):
        assert_contains(compose_404(NotFoundRenderContext()), "<title>404 - My PagePress Site</title>")
