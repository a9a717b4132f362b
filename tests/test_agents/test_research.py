"""Tests for the Research Agent."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from mindmate.agents.research import (
    NO_RESULTS_MESSAGE,
    SEARCH_FAILURE_MESSAGE,
    fetch_arxiv_feed,
    format_citation,
    parse_arxiv_feed,
    search_papers,
    summarize_abstract,
)
from mindmate.config.settings import Settings
from mindmate.errors import UpstreamServiceError, ValidationError

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title type="html">ArXiv Query: search_query=all:transformers</title>
  <id>http://arxiv.org/api/feed-id</id>
  <entry>
    <id>http://arxiv.org/abs/1706.03762v7</id>
    <published>2017-06-12T17:57:34Z</published>
    <title>Attention Is All
      You Need</title>
    <summary>  The dominant sequence transduction models are based on complex
      recurrent or convolutional neural networks.  </summary>
    <author><name>Ashish Vaswani</name></author>
    <author><name>Noam Shazeer</name></author>
    <link href="http://arxiv.org/abs/1706.03762v7" rel="alternate" type="text/html"/>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2101.00001v1</id>
    <published>2021-01-01T00:00:00Z</published>
    <title>A Single Author Paper</title>
    <summary>Short abstract.</summary>
    <author><name>Jane Doe</name></author>
  </entry>
</feed>
"""

EMPTY_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title type="html">ArXiv Query: search_query=all:zzzz</title>
</feed>
"""


class TestParseArxivFeed:
    """Test feed parsing."""

    def test_parses_entries(self):
        """Test that each entry becomes a paper with cleaned fields."""
        papers = parse_arxiv_feed(SAMPLE_FEED)

        assert len(papers) == 2
        paper = papers[0]
        assert paper.id == "1706.03762v7"
        assert paper.title == "Attention Is All You Need"
        assert paper.authors == ["Ashish Vaswani", "Noam Shazeer"]
        assert paper.published == 2017
        assert paper.abstract.startswith("The dominant sequence")
        assert paper.url == "http://arxiv.org/abs/1706.03762v7"

    def test_empty_feed(self):
        """Test that a feed without entries gives no papers."""
        assert parse_arxiv_feed(EMPTY_FEED) == []


class TestFormatCitation:
    """Test citation formatting."""

    def test_multiple_authors_use_et_al(self):
        """Test that only the first author is named."""
        citation = format_citation(["A. One", "B. Two"], 2017, "Title", "1706.03762v7")

        assert citation == "A. One, et al. (2017). Title. arXiv preprint arXiv:1706.03762v7."

    def test_single_author(self):
        """Test that a single author is named alone."""
        citation = format_citation(["Jane Doe"], 2021, "Title", "2101.00001v1")

        assert citation.startswith("Jane Doe (2021).")

    def test_no_authors(self):
        """Test the fallback author name."""
        assert format_citation([], None, "Title", "x").startswith("Unknown (n.d.).")


class TestFetchArxivFeed:
    """Test the arXiv HTTP call."""

    def test_sends_query_parameters(self, settings: Settings):
        """Test the request sent to arXiv."""
        response = MagicMock(status_code=200, text=EMPTY_FEED)
        with patch("mindmate.agents.research.requests.get", return_value=response) as get:
            assert fetch_arxiv_feed("transformers", settings) == EMPTY_FEED

        params = get.call_args.kwargs["params"]
        assert params["search_query"] == "all:transformers"
        assert params["max_results"] == 5

    def test_http_error(self, settings: Settings):
        """Test that a non-200 answer is a service error."""
        response = MagicMock(status_code=503, text="")
        with patch("mindmate.agents.research.requests.get", return_value=response):
            with pytest.raises(UpstreamServiceError) as exc_info:
                fetch_arxiv_feed("transformers", settings)

        assert exc_info.value.message == SEARCH_FAILURE_MESSAGE

    def test_network_error(self, settings: Settings):
        """Test that a connection failure is a service error."""
        with patch(
            "mindmate.agents.research.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with pytest.raises(UpstreamServiceError):
                fetch_arxiv_feed("transformers", settings)


class TestSummarizeAbstract:
    """Test summarize_abstract."""

    def test_uses_paper_summary_options(self, settings: Settings, fake_llm):
        """Test the lower temperature and token cap for paper summaries."""
        make_llm = fake_llm("It introduces the Transformer.")

        summary = summarize_abstract("An abstract.", settings, make_llm)

        assert summary == "It introduces the Transformer."
        assert make_llm.calls == [{"temperature": 0.5, "max_tokens": 200}]

    def test_requires_abstract(self, settings: Settings, fake_llm):
        """Test that an empty abstract is rejected."""
        with pytest.raises(ValidationError, match="Abstract is required"):
            summarize_abstract("", settings, fake_llm("unused"))


class TestSearchPapers:
    """Test search_papers."""

    def test_papers_get_ai_summaries(self, settings: Settings, fake_llm):
        """Test that every paper is summarized."""
        make_llm = fake_llm("A short AI summary.")

        result = search_papers(
            "transformers", settings, make_llm, fetch_feed=lambda q, s: SAMPLE_FEED
        )

        assert len(result.papers) == 2
        assert all(p.ai_summary == "A short AI summary." for p in result.papers)
        assert result.message is None
        assert len(make_llm.calls) == 2

    def test_no_results_message(self, settings: Settings, fake_llm):
        """Test the message returned when nothing matches."""
        make_llm = fake_llm("unused")

        result = search_papers("zzzz", settings, make_llm, fetch_feed=lambda q, s: EMPTY_FEED)

        assert result.papers == []
        assert result.message == NO_RESULTS_MESSAGE
        assert make_llm.calls == []

    def test_without_key_uses_abstract_excerpt(self, settings_without_key: Settings):
        """Test that search works without a key, using the first 300 abstract chars."""
        feed = SAMPLE_FEED.replace("Short abstract.", "y" * 400)

        result = search_papers(
            "transformers", settings_without_key, fetch_feed=lambda q, s: feed
        )

        assert result.papers[1].ai_summary == "y" * 300

    def test_failed_summary_falls_back(self, settings: Settings):
        """Test that one failed summary does not fail the search."""
        llm = MagicMock()
        llm.invoke.side_effect = RuntimeError("model down")

        result = search_papers(
            "transformers",
            settings,
            lambda *args, **kwargs: llm,
            fetch_feed=lambda q, s: SAMPLE_FEED,
        )

        assert result.papers[1].ai_summary == "Short abstract."

    def test_blank_query_is_rejected(self, settings: Settings, fake_llm):
        """Test that a blank query never reaches arXiv."""
        fetch_feed = MagicMock()

        with pytest.raises(ValidationError):
            search_papers("  ", settings, fake_llm("unused"), fetch_feed=fetch_feed)

        fetch_feed.assert_not_called()

    def test_query_is_trimmed(self, settings: Settings, fake_llm):
        """Test that surrounding whitespace is removed before searching."""
        fetch_feed = MagicMock(return_value=EMPTY_FEED)

        search_papers("  transformers  ", settings, fake_llm("unused"), fetch_feed=fetch_feed)

        fetch_feed.assert_called_once_with("transformers", settings)
