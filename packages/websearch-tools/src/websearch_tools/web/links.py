from __future__ import annotations

import re

from websearch_core.types import LinkRecord
from websearch_tools.web.extract import dedupe_links, parse_html, resolve_url
from websearch_tools.web.formatting import RULE

LINK_TEXT_LIMIT = 100
MAX_SHOWN_LINKS = 50
NO_TEXT = "(no text)"

_SKIPPED_PREFIXES = ("#", "javascript:", "mailto:")
_WHITESPACE = re.compile(r"\s+")


def extract_links(
    html: str, url: str, filter_text: str | None = None
) -> list[LinkRecord]:
    """Every distinct link in the whole document, junk elements included.

    ``filter_text`` keeps a link when either its resolved URL or its
    anchor text contains it, case-insensitively.
    """
    soup = parse_html(html)
    needle = filter_text.lower() if filter_text else None

    links: list[LinkRecord] = []
    for a in soup.select("a[href]"):
        href = a.get("href") or ""
        if not href or href.startswith(_SKIPPED_PREFIXES):
            continue
        absolute = resolve_url(href, url)
        if absolute is None:
            continue

        text = _WHITESPACE.sub(" ", a.get_text().strip())
        text = text[:LINK_TEXT_LIMIT] or NO_TEXT

        if needle and needle not in absolute.lower() and needle not in text.lower():
            continue
        links.append(LinkRecord(text=text, url=absolute))

    return dedupe_links(links)


def format_links(
    url: str, links: list[LinkRecord], filter_text: str | None = None
) -> str:
    """Render at most MAX_SHOWN_LINKS links; the header reports the full count."""
    out = f"Links from: {url}\nFound: {len(links)}"
    if len(links) > MAX_SHOWN_LINKS:
        out += f" (showing {MAX_SHOWN_LINKS})"
    if filter_text:
        out += f' | filter: "{filter_text}"'
    out += f"\n{RULE}\n\n"

    for i, link in enumerate(links[:MAX_SHOWN_LINKS], 1):
        out += f"[{i}] {link.text}\n    {link.url}\n\n"
    return out.strip()
