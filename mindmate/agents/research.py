"""Research Agent - Searches arXiv and summarizes paper abstracts."""

import logging
from typing import Callable

import requests
from bs4 import BeautifulSoup
from langchain_core.messages import HumanMessage, SystemMessage

from mindmate.agents.llm import (
    ChatModelFactory,
    build_chat_model,
    invoke_model,
    require_text,
)
from mindmate.config.settings import Settings, get_settings
from mindmate.errors import MindmateError, UpstreamParseError, UpstreamServiceError
from mindmate.models.study import Paper, PaperSearchResult
from mindmate.utils import collapse_whitespace

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = (
    "You are a helpful research assistant. Summarize this academic paper abstract "
    "in 2-3 sentences, highlighting the main contribution and findings."
)

SEARCH_FAILURE_MESSAGE = "Failed to search papers. Please try again."
SUMMARY_FAILURE_MESSAGE = "Failed to summarize paper. Please try again."
NO_RESULTS_MESSAGE = "No papers found for your query."

# Length of the abstract excerpt used when no AI summary is available
FALLBACK_SUMMARY_CHARS = 300

FeedFetcher = Callable[[str, Settings], str]


def fetch_arxiv_feed(query: str, settings: Settings) -> str:
    """
    Fetch the raw Atom feed for a query from the arXiv API.

    Args:
        query: Free-text search query
        settings: Application settings

    Returns:
        The feed XML

    Raises:
        UpstreamServiceError: If arXiv cannot be reached or answers with an error
    """
    params = {
        "search_query": f"all:{query}",
        "start": 0,
        "max_results": settings.arxiv_max_results,
    }
    try:
        resp = requests.get(
            settings.arxiv_api_url, params=params, timeout=settings.request_timeout
        )
    except requests.RequestException as e:
        logger.error("arXiv request failed: %s", e)
        raise UpstreamServiceError(SEARCH_FAILURE_MESSAGE) from e

    if resp.status_code != 200:
        logger.error("arXiv answered HTTP %s", resp.status_code)
        raise UpstreamServiceError(SEARCH_FAILURE_MESSAGE)
    return resp.text


def _tag_text(node, name: str) -> str:
    tag = node.find(name)
    return collapse_whitespace(tag.get_text()) if tag else ""


def parse_arxiv_feed(xml: str) -> list[Paper]:
    """
    Parse an arXiv Atom feed into papers (without AI summaries).

    Args:
        xml: Feed XML

    Returns:
        Papers in feed order
    """
    soup = BeautifulSoup(xml, "html.parser")

    papers = []
    for entry in soup.find_all("entry"):
        url = _tag_text(entry, "id")
        title = _tag_text(entry, "title")
        abstract = _tag_text(entry, "summary")
        authors = [
            _tag_text(author, "name")
            for author in entry.find_all("author")
            if _tag_text(author, "name")
        ]

        published_text = _tag_text(entry, "published")
        published = int(published_text[:4]) if published_text[:4].isdigit() else None

        arxiv_id = url.split("/abs/", 1)[1] if "/abs/" in url else url

        papers.append(
            Paper(
                id=arxiv_id,
                title=title,
                authors=authors,
                published=published,
                abstract=abstract,
                citation=format_citation(authors, published, title, arxiv_id),
                url=url,
            )
        )

    return papers


def format_citation(
    authors: list[str], published: int | None, title: str, arxiv_id: str
) -> str:
    """Build an APA-style citation for an arXiv preprint."""
    if len(authors) > 1:
        authors_citation = f"{authors[0]}, et al."
    else:
        authors_citation = authors[0] if authors else "Unknown"
    year = published if published is not None else "n.d."
    return f"{authors_citation} ({year}). {title}. arXiv preprint arXiv:{arxiv_id}."


def summarize_abstract(
    abstract: str,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
) -> str:
    """
    Research Agent: Summarize a paper abstract in two or three sentences.

    Args:
        abstract: Paper abstract
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory

    Returns:
        The summary text
    """
    require_text(abstract, field="Abstract")
    settings = settings or get_settings()

    llm = make_llm(
        settings,
        temperature=settings.paper_summary_temperature,
        max_tokens=settings.paper_summary_max_tokens,
    )

    messages = [
        SystemMessage(content=SUMMARY_PROMPT),
        HumanMessage(content=abstract),
    ]

    content = invoke_model(llm, messages, "paper-summary")
    if not content:
        raise UpstreamParseError(SUMMARY_FAILURE_MESSAGE)
    return content


def search_papers(
    query: str,
    settings: Settings | None = None,
    make_llm: ChatModelFactory = build_chat_model,
    fetch_feed: FeedFetcher = fetch_arxiv_feed,
) -> PaperSearchResult:
    """
    Research Agent: Search arXiv and attach an AI summary to each paper.

    A paper whose summary cannot be produced keeps an excerpt of its
    abstract instead, so one failed summary never fails the search.

    Args:
        query: Free-text search query
        settings: Application settings (defaults to the cached settings)
        make_llm: Chat model factory
        fetch_feed: Function returning the feed XML for a query

    Returns:
        PaperSearchResult with the papers, or a message when nothing matched
    """
    require_text(query, field="Query")
    settings = settings or get_settings()

    papers = parse_arxiv_feed(fetch_feed(query.strip(), settings))
    logger.info("arXiv returned %d papers for %r", len(papers), query)

    if not papers:
        return PaperSearchResult(papers=[], message=NO_RESULTS_MESSAGE)

    summarize = settings.api_key_configured()
    for paper in papers:
        fallback = paper.abstract[:FALLBACK_SUMMARY_CHARS]
        if not summarize or not paper.abstract:
            paper.ai_summary = fallback
            continue
        try:
            paper.ai_summary = summarize_abstract(paper.abstract, settings, make_llm)
        except MindmateError as e:
            logger.warning("Using abstract excerpt for %s: %s", paper.id, e.message)
            paper.ai_summary = fallback

    return PaperSearchResult(papers=papers)
