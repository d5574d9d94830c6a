"""Markdown to HTML rendering for the privacy policy page."""
from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from pathlib import Path

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
COPYRIGHT = "© 2023-2024 CyberThing all rights reserved"

_SLUG_RE = re.compile(r"[^\w]+")


def slugify(text: str) -> str:
    return _SLUG_RE.sub("-", text.lower())


class HeadingAnchorProcessor(Treeprocessor):
    """Give every heading a slug id, a self-link and a link marker."""

    def run(self, root: etree.Element) -> None:
        headings = [element for element in root.iter() if element.tag in HEADING_TAGS]
        for element in headings:
            slug = slugify("".join(element.itertext()))
            anchor = etree.Element("a", {"href": f"#{slug}"})
            anchor.text = element.text
            for child in list(element):
                element.remove(child)
                anchor.append(child)
            element.text = None
            element.set("id", slug)
            element.append(anchor)
            marker = etree.SubElement(element, "span")
            marker.text = "🔗"


class HeadingAnchorExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # Lower priority than "inline" (20) so headings already hold their final text.
        md.treeprocessors.register(HeadingAnchorProcessor(md), "heading_anchor", 5)


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=[HeadingAnchorExtension()])


def render_privacy_page(path: str | Path) -> str:
    """Render the markdown document at `path` as a standalone HTML page."""

    body = render_markdown(Path(path).read_text(encoding="utf-8"))
    head = '<head><title>Privacy Policy</title><link rel="stylesheet" href="/style.css"></head>'
    return (
        f"<!DOCTYPE html><html>{head}<body><main>{body}</main>"
        f"<center>{COPYRIGHT}</center></body></html>"
    )
