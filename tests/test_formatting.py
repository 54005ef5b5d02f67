from __future__ import annotations

from websearch_core.types import SearchResultItem
from websearch_tools.web.formatting import (
    NOTHING_FOUND,
    format_ai_answer,
    format_results,
    format_search,
    normalize_whitespace,
)


def _organic(n: int) -> list[dict]:
    return [
        {
            "title": f"Result {i}",
            "link": f"https://example.com/{i}",
            "snippet": f"Snippet {i}",
        }
        for i in range(1, n + 1)
    ]


class TestNormalizeWhitespace:
    def test_collapses_spaces_and_blank_lines(self):
        text = "  a \t\t b\n\n\n\n c  "
        assert normalize_whitespace(text) == "a b\n\n c"

    def test_truncates_after_stripping(self):
        assert normalize_whitespace("   abcdef   ", 3) == "abc"


class TestFormatResults:
    def test_empty_is_sentinel(self):
        assert format_results([]) == NOTHING_FOUND
        assert format_results(None) == NOTHING_FOUND

    def test_numbered_blocks(self):
        items = [
            SearchResultItem("First", "https://a.example", "about a"),
            SearchResultItem("Second", "https://b.example"),
        ]
        assert format_results(items) == (
            "[1] First\n    URL: https://a.example\n    about a\n\n"
            "[2] Second\n    URL: https://b.example\n    -"
        )


class TestFormatSearch:
    def test_header_states_query_and_site(self):
        out = format_search(
            "fastapi tutorial",
            {"organic_results": _organic(6), "search_information": {"total_results": 1234}},
            site="github.com",
            time_period="last_week",
        )
        first_line = out.splitlines()[0]
        assert first_line == 'Search: "fastapi tutorial" (site:github.com) [last_week]'
        assert "Page 1 | ~1234 results" in out

    def test_header_without_site(self):
        out = format_search("rust", {"organic_results": _organic(1)})
        assert out.splitlines()[0] == 'Search: "rust"'
        assert "~? results" in out

    def test_num_results_bounds_blocks(self):
        out = format_search("q", {"organic_results": _organic(15)}, num_results=7)
        assert "[7] Result 7" in out
        assert "[8]" not in out
        assert "Result 8" not in out

    def test_tip_when_few_results(self):
        out = format_search("q", {"organic_results": _organic(2)}, page=3)
        assert out.endswith("Tip: try page=4 or use ai_search for better answers")

    def test_no_tip_with_enough_results(self):
        out = format_search("q", {"organic_results": _organic(5)})
        assert "Tip:" not in out

    def test_no_results(self):
        out = format_search("q", {})
        assert NOTHING_FOUND in out


class TestFormatAIAnswer:
    def test_prefers_markdown(self):
        data = {
            "markdown": "## Answer\n\nUse **asyncio**.",
            "text_blocks": [{"type": "paragraph", "answer": "ignored"}],
        }
        out = format_ai_answer("async python", data)
        assert out.startswith('AI Answer: "async python"')
        assert "Use **asyncio**." in out
        assert "ignored" not in out

    def test_markdown_is_capped(self):
        out = format_ai_answer("q", {"markdown": "x" * 9000})
        assert "x" * 8000 in out
        assert "x" * 8001 not in out

    def test_renders_text_blocks(self):
        data = {
            "text_blocks": [
                {"type": "header", "answer": "Overview"},
                {"type": "paragraph", "answer": "Some text."},
                {"type": "code_blocks", "language": "python", "code": "print(1)"},
                {
                    "type": "unordered_list",
                    "items": [{"answer": "first"}, "second"],
                },
                {"type": "table", "answer": "skipped"},
            ]
        }
        out = format_ai_answer("q", data)
        assert "### Overview" in out
        assert "Some text." in out
        assert "```python\nprint(1)\n```" in out
        assert "- first\n- second" in out
        assert "skipped" not in out

    def test_sources_and_nearby_are_capped(self):
        data = {
            "markdown": "answer",
            "reference_links": [
                {"index": i, "title": f"Ref {i}", "link": f"https://ref.example/{i}"}
                for i in range(1, 11)
            ],
            "local_results": [
                {"title": "Cafe One", "rating": 4.5, "address": "1 Main St"},
                {"title": "Cafe Two"},
                {"title": "Cafe Three"},
                {"title": "Cafe Four"},
                {"title": "Cafe Five"},
                {"title": "Cafe Six"},
            ],
        }
        out = format_ai_answer("coffee", data)
        assert "Sources:\n[1] Ref 1\n https://ref.example/1" in out
        assert "[8] Ref 8" in out
        assert "Ref 9" not in out
        assert "- Cafe One (4.5★) - 1 Main St" in out
        assert "- Cafe Two\n" in out
        assert "Cafe Six" not in out

    def test_whitespace_normalized(self):
        out = format_ai_answer("q", {"markdown": "a\n\n\n\n\nb   c"})
        assert out.endswith("a\n\nb c")
