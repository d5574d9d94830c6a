"""Tests for markdown rendering of the privacy page."""
from __future__ import annotations

from app.services.privacy_renderer import render_markdown, render_privacy_page, slugify


def test_slugify_collapses_non_word_runs():
    assert slugify("What We Collect?") == "what-we-collect-"
    assert slugify("Cookies & Logs") == "cookies-logs"


def test_headings_get_ids_and_self_links():
    html = render_markdown("# Title\n\n### Inline `code` here\n")

    assert '<h1 id="title"><a href="#title">Title</a><span>🔗</span></h1>' in html
    assert '<h3 id="inline-code-here">' in html
    assert '<a href="#inline-code-here">Inline <code>code</code> here</a>' in html


def test_render_privacy_page_wraps_document(tmp_path):
    doc = tmp_path / "privacy.md"
    doc.write_text("Plain paragraph.\n", encoding="utf-8")

    page = render_privacy_page(doc)

    assert page.startswith("<!DOCTYPE html><html><head>")
    assert '<link rel="stylesheet" href="/style.css">' in page
    assert "<main><p>Plain paragraph.</p></main>" in page
    assert page.endswith("all rights reserved</center></body></html>")
