from __future__ import annotations

from typing import TypedDict

from bs4 import BeautifulSoup, Tag
from django.utils.text import slugify


class HeadingNode(TypedDict):
    level: int
    id: str
    title: str
    children: list["HeadingNode"]


def _heading_text(heading: Tag) -> str:
    # Embedded iframes never carry text, so get_text is enough here
    return heading.get_text(separator=" ", strip=True)


def extract_toc_from_html(html: str) -> list[HeadingNode]:
    """
    Given rendered article HTML, return a hierarchical list of headings.

    Each node carries the heading level (1-6), the element id (Pandoc's
    auto identifier, or a slug of the text when missing), the plain-text title
    and nested children for deeper headings.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    toc: list[HeadingNode] = []
    stack: list[HeadingNode] = []

    for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        level = int(heading.name[1])  # "h2" -> 2
        text = _heading_text(heading)
        if not text:
            continue

        node: HeadingNode = {
            "level": level,
            "id": heading.get("id") or slugify(text),
            "title": text,
            "children": [],
        }

        while stack and stack[-1]["level"] >= level:
            stack.pop()

        if stack:
            stack[-1]["children"].append(node)
        else:
            toc.append(node)

        stack.append(node)

    return toc
