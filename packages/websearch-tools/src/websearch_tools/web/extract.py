"""Heuristic main-content extraction from fetched HTML.

Everything here is a pure transform of the HTML string: the same input
always renders to the same output. The heuristics are best-effort and
make no claim of correctness for any given page.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from urllib.parse import urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup, NavigableString, Tag

from websearch_core.types import LinkRecord, PageSummary, ScrapedPage
from websearch_tools.web.formatting import RULE, normalize_whitespace
from websearch_tools.web.params import ExtractMode

JUNK_SELECTORS = ", ".join([
    "script", "style", "noscript", "iframe", "svg",
    "nav", "footer", "header", "aside",
    ".ads", ".sidebar", ".comments", ".cookie-banner",
])

# Tried in order; the first with more than MIN_CONTENT_CHARS of text wins.
CONTENT_SELECTORS = (
    "article", "main", "[role='main']",
    ".post-content", ".article-content", ".entry-content",
    ".content", "#content", ".post-body", ".markdown-body",
)
MIN_CONTENT_CHARS = 300

# scrape_multiple takes the first of these that is present at all.
SUMMARY_SELECTORS = ("article", "main", ".content", "#content", "body")

STRUCTURE_TAGS = "h1, h2, h3, h4, h5, h6, p, li, pre, blockquote"
HEADING_TAGS = "h1, h2, h3, h4, h5, h6"

UNTITLED = "Untitled"
NO_CONTENT = "No content found."
LINK_TEXT_LIMIT = 80
MAX_PAGE_LINKS = 20


def parse_html(html: str) -> BeautifulSoup:
    """Parse with lxml: implied end tags (`<li>`, `<p>`) are closed and loose
    content is wrapped in a `<body>`.
    """
    return BeautifulSoup(html, "lxml")


def strip_junk(soup: BeautifulSoup) -> None:
    """Remove non-content elements in place. Removed content is lost."""
    for el in soup.select(JUNK_SELECTORS):
        el.extract()


def resolve_url(href: str, base_url: str) -> str | None:
    """Resolve ``href`` against ``base_url``; None when it cannot be resolved."""
    try:
        parts = urlsplit(urljoin(base_url, href.strip()))
    except ValueError:
        return None
    if not parts.scheme:
        return None
    if parts.scheme in ("http", "https") and not parts.path:
        parts = parts._replace(path="/")
    return urlunsplit(parts)


def _text(region: Iterable[Tag]) -> str:
    return "".join(el.get_text() for el in region)


def _body(soup: BeautifulSoup) -> Tag:
    return soup.body or soup


def _find_all(region: Sequence[Tag], css: str) -> list[Tag]:
    """Descendants of every region root matching ``css``, without repeats."""
    seen: set[int] = set()
    found: list[Tag] = []
    for root in region:
        for el in root.select(css):
            if id(el) not in seen:
                seen.add(id(el))
                found.append(el)
    return found


def select_region(
    soup: BeautifulSoup, selector: str | None = None
) -> list[Tag]:
    """Pick the main content region.

    A caller-supplied selector is used as-is; if it matches nothing the
    body is used. Otherwise the first of CONTENT_SELECTORS whose text is
    longer than MIN_CONTENT_CHARS wins, falling back to the body.
    """
    region: list[Tag] = []
    if selector:
        region = soup.select(selector)
    else:
        for css in CONTENT_SELECTORS:
            matches = soup.select(css)
            if matches and len(_text(matches).strip()) > MIN_CONTENT_CHARS:
                region = matches
                break
    return region or [_body(soup)]


def _meta(soup: BeautifulSoup, css: str, attr: str = "content") -> str:
    el = soup.select_one(css)
    if el is None:
        return ""
    return el.get(attr) or ""


def extract_metadata(soup: BeautifulSoup) -> dict[str, str]:
    title = "".join(t.get_text() for t in soup.find_all("title")).strip()
    return {
        "title": title or _meta(soup, 'meta[property="og:title"]') or UNTITLED,
        "description": (
            _meta(soup, 'meta[name="description"]')
            or _meta(soup, 'meta[property="og:description"]')
        ),
        "author": _meta(soup, 'meta[name="author"]'),
        "published": (
            _meta(soup, 'meta[property="article:published_time"]')
            or _meta(soup, "time[datetime]", attr="datetime")
        ),
    }


def render_structured(region: Sequence[Tag]) -> str:
    out = ""
    for el in _find_all(region, STRUCTURE_TAGS):
        text = el.get_text().strip()
        if not text:
            continue
        tag = el.name
        if tag[0] == "h":
            out += f"\n{'#' * int(tag[1])} {text}\n\n"
        elif tag == "li":
            out += f"- {text}\n"
        elif tag == "pre":
            out += f"```\n{text}\n```\n\n"
        elif tag == "blockquote":
            out += f"> {text}\n\n"
        else:
            out += f"{text}\n\n"
    return out


def _replace(region: Sequence[Tag], css: str, render) -> None:
    for el in _find_all(region, css):
        if el.parent is not None:
            el.replace_with(NavigableString(render(el)))


def render_markdown(region: Sequence[Tag]) -> str:
    """Swap formatting elements for markdown markup, then take the text.

    Elements that are not replaced contribute their plain text, so the
    result mixes markup and plain text.
    """
    _replace(
        region, HEADING_TAGS,
        lambda el: f"\n{'#' * int(el.name[1])} {el.get_text().strip()}\n\n",
    )
    _replace(region, "strong, b", lambda el: f"**{el.get_text()}**")
    _replace(region, "em, i", lambda el: f"*{el.get_text()}*")
    _replace(region, "code", lambda el: f"`{el.get_text()}`")
    _replace(region, "pre", lambda el: f"\n```\n{el.get_text()}\n```\n")
    return _text(region)


def collect_links(region: Sequence[Tag], base_url: str) -> list[LinkRecord]:
    links: list[LinkRecord] = []
    for a in _find_all(region, "a[href]"):
        href = a.get("href") or ""
        text = a.get_text().strip()
        if not href or href.startswith("#") or href.startswith("javascript:"):
            continue
        if not text:
            continue
        url = resolve_url(href, base_url)
        if url is None:
            continue
        links.append(LinkRecord(text=text[:LINK_TEXT_LIMIT], url=url))
    return links


def dedupe_links(links: Iterable[LinkRecord]) -> list[LinkRecord]:
    """Keep the first record for each resolved URL, in order."""
    unique: dict[str, LinkRecord] = {}
    for link in links:
        unique.setdefault(link.url, link)
    return list(unique.values())


def extract_page(
    html: str,
    url: str,
    *,
    selector: str | None = None,
    mode: ExtractMode = "text",
    include_links: bool = False,
    max_length: int = 10000,
) -> ScrapedPage:
    soup = parse_html(html)
    strip_junk(soup)
    meta = extract_metadata(soup)
    region = select_region(soup, selector)

    if mode == "structured":
        body = render_structured(region)
    elif mode == "markdown":
        body = render_markdown(region)
    else:
        body = _text(region)

    links: list[LinkRecord] = []
    if include_links:
        links = dedupe_links(collect_links(region, url))[:MAX_PAGE_LINKS]

    return ScrapedPage(
        url=url,
        body=normalize_whitespace(body, max_length),
        links=tuple(links),
        **meta,
    )


def render_page(page: ScrapedPage) -> str:
    out = f"URL: {page.url}\nTitle: {page.title}\n"
    if page.description:
        out += f"Description: {page.description}\n"
    if page.author:
        out += f"Author: {page.author}\n"
    if page.published:
        out += f"Date: {page.published}\n"
    out += f"{RULE}\n\n{page.body or NO_CONTENT}"

    if page.links:
        out += "\n\n---\nLinks:\n"
        for i, link in enumerate(page.links, 1):
            out += f"[{i}] {link.text}\n    {link.url}\n"
    return out


def summarize_page(html: str, url: str, max_length: int = 2000) -> PageSummary:
    """Title and body for one page of a multi-page scrape."""
    soup = parse_html(html)
    strip_junk(soup)

    title = "".join(t.get_text() for t in soup.find_all("title")).strip()
    body = ""
    for css in SUMMARY_SELECTORS:
        matches = soup.select(css)
        if matches:
            body = _text(matches).strip()
            break
    else:
        body = soup.get_text().strip()

    return PageSummary(
        url=url,
        title=title or UNTITLED,
        body=normalize_whitespace(body, max_length),
    )
