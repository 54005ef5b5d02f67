from __future__ import annotations

from dataclasses import dataclass, field

# ── Search Types ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class SearchResultItem:
    """A single organic result from the upstream search API."""
    title: str
    link: str
    snippet: str = ""


# ── Page Types ───────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class LinkRecord:
    """An anchor on a page, with its href resolved to an absolute URL."""
    text: str
    url: str


@dataclass(frozen=True, slots=True)
class ScrapedPage:
    """Metadata and extracted body of one fetched page."""
    url: str
    title: str
    description: str = ""
    author: str = ""
    published: str = ""
    body: str = ""
    links: tuple[LinkRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class PageSummary:
    """Title and trimmed body of one page in a multi-page scrape."""
    url: str
    title: str
    body: str


@dataclass(frozen=True, slots=True)
class PageOutcome:
    """Settled result of one fetch in a multi-page scrape."""
    url: str
    page: PageSummary | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.page is not None
