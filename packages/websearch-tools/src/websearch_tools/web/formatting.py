"""Plain-text rendering of search API payloads."""
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from websearch_core.types import SearchResultItem

RULE = "=" * 50
NOTHING_FOUND = "Nothing found."

AI_MARKDOWN_LIMIT = 8000
AI_TEXT_BLOCK_LIMIT = 10
AI_SOURCE_LIMIT = 8
AI_NEARBY_LIMIT = 5
AI_ANSWER_LIMIT = 12000

_SPACES = re.compile(r"[\t ]+")
_BLANK_LINES = re.compile(r"\n{3,}")


def normalize_whitespace(text: str, limit: int = 10000) -> str:
    """Collapse space/tab runs and 3+ newlines, strip, then truncate."""
    text = _SPACES.sub(" ", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()[:limit]


def format_results(items: Sequence[SearchResultItem] | None) -> str:
    if not items:
        return NOTHING_FOUND
    blocks = [
        f"[{i}] {item.title}\n    URL: {item.link}\n    {item.snippet or '-'}"
        for i, item in enumerate(items, 1)
    ]
    return "\n\n".join(blocks)


def parse_results(data: dict[str, Any]) -> list[SearchResultItem]:
    return [
        SearchResultItem(
            title=r.get("title", ""),
            link=r.get("link", ""),
            snippet=r.get("snippet") or "",
        )
        for r in data.get("organic_results") or []
    ]


def format_search(
    query: str,
    data: dict[str, Any],
    *,
    num_results: int = 10,
    page: int = 1,
    time_period: str | None = None,
    site: str | None = None,
) -> str:
    """Render a ``google`` engine response as a numbered listing.

    Only the first ``num_results`` organic results are shown.
    """
    results = parse_results(data)[:num_results]
    total = (data.get("search_information") or {}).get("total_results") or "?"

    header = f'Search: "{query}"'
    if site:
        header += f" (site:{site})"
    if time_period:
        header += f" [{time_period}]"
    header += f"\nPage {page} | ~{total} results\n{RULE}\n\n"

    tip = ""
    if len(results) < 5:
        tip = f"\n\nTip: try page={page + 1} or use ai_search for better answers"

    return header + format_results(results) + tip


def _render_text_blocks(blocks: list[dict[str, Any]]) -> str:
    out = ""
    for block in blocks[:AI_TEXT_BLOCK_LIMIT]:
        kind = block.get("type")
        if kind == "header":
            out += f"\n### {block.get('answer', '')}\n"
        elif kind == "paragraph":
            out += f"{block.get('answer', '')}\n\n"
        elif kind == "code_blocks":
            out += f"```{block.get('language') or ''}\n{block.get('code', '')}\n```\n\n"
        elif kind == "unordered_list" and block.get("items"):
            for item in block["items"]:
                text = item.get("answer") if isinstance(item, dict) else item
                out += f"- {text}\n"
            out += "\n"
    return out


def format_ai_answer(query: str, data: dict[str, Any]) -> str:
    """Render a ``google_ai_mode`` response with sources and nearby places.

    The ready-made ``markdown`` field wins over ``text_blocks``.
    """
    out = f'AI Answer: "{query}"\n{RULE}\n\n'

    if data.get("markdown"):
        out += data["markdown"][:AI_MARKDOWN_LIMIT]
    elif data.get("text_blocks"):
        out += _render_text_blocks(data["text_blocks"])

    references = data.get("reference_links") or []
    if references:
        out += "\n---\nSources:\n"
        for ref in references[:AI_SOURCE_LIMIT]:
            out += f"[{ref.get('index', '')}] {ref.get('title', '')}\n    {ref.get('link', '')}\n"

    places = data.get("local_results") or []
    if places:
        out += "\n---\nNearby:\n"
        for place in places[:AI_NEARBY_LIMIT]:
            out += f"- {place.get('title', '')}"
            if place.get("rating"):
                out += f" ({place['rating']}★)"
            if place.get("address"):
                out += f" - {place['address']}"
            out += "\n"

    return normalize_whitespace(out, AI_ANSWER_LIMIT)
