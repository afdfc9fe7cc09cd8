"""
Wikipedia tools for the toolchat agentic loop.

Both tools use the MediaWiki Action API (``https://en.wikipedia.org/w/api.php``),
which needs no API key but asks clients to send a descriptive
``User-Agent``.

- ``wikipedia_titles``: full-text search restricted to page titles
  (``srsearch=intitle:<keyword>``), returning up to 20 titles as a JSON
  array of strings.
- ``wikipedia_search``: the plain-text introductory extract of one page,
  looked up by exact title (redirects are followed).

Neither tool raises for expected failures: empty input, zero hits, HTTP
errors and undecodable responses all come back as explanatory text for the
model to read.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from toolchat.conversation.providers import ToolDefinition
from toolchat.conversation.tools.registry import ToolArguments

logger = logging.getLogger(__name__)

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"

MAX_TITLES = 20


class _WikipediaAPI:
    """Shared HTTP plumbing for the Wikipedia tools.

    Attributes:
        api_url: MediaWiki ``api.php`` endpoint.
        timeout: HTTP request timeout in seconds.
        user_agent: ``User-Agent`` header sent with every request.
    """

    def __init__(
        self,
        api_url: str = WIKIPEDIA_API_URL,
        timeout: float = 10.0,
        user_agent: str = "toolchat/0.1",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def _query(self, params: dict[str, Any]) -> dict[str, Any]:
        """GET ``api.php`` with *params* and return the decoded JSON body.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.TransportError: If the request cannot be completed.
            ValueError: If the body is not JSON.
        """
        with httpx.Client(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        ) as client:
            response = client.get(self.api_url, params={**params, "format": "json"})
            response.raise_for_status()
            return response.json()


class WikipediaTitlesTool(_WikipediaAPI):
    """Lists Wikipedia page titles containing a keyword."""

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="wikipedia_titles",
        description=(
            "List Wikipedia page titles containing the given keyword. "
            "Send exactly one word, e.g. 'ducks' or 'Florida'."
        ),
        parameters={
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "description": "A single search word",
                }
            },
            "required": ["keyword"],
        },
    )

    class Arguments(ToolArguments):
        keyword: str

    def list_titles(self, keyword: str) -> str:
        """Return matching titles as a JSON array, or an explanation."""
        keyword = keyword.strip()
        if not keyword:
            return "No query provided."

        logger.debug("Searching Wikipedia titles for %r", keyword)
        try:
            data = self._query(
                {
                    "action": "query",
                    "list": "search",
                    "srsearch": f"intitle:{keyword}",
                    "srlimit": MAX_TITLES,
                }
            )
        except httpx.HTTPStatusError as exc:
            logger.error("Wikipedia API HTTP error: %s", exc)
            return f"Wikipedia API error {exc.response.status_code}: {exc.response.text}"
        except httpx.TransportError as exc:
            logger.error("Wikipedia API request failed: %s", exc)
            return f"Error calling Wikipedia: {exc}"
        except ValueError as exc:
            return f"Error decoding Wikipedia JSON: {exc}"

        hits = (data.get("query") or {}).get("search") or []
        titles = [hit["title"] for hit in hits if isinstance(hit, dict) and "title" in hit]
        if not titles:
            return f"No page titles found for '{keyword}'."

        return json.dumps(titles[:MAX_TITLES], indent=2)

    def as_dispatcher_entry(self):
        def _call(args: WikipediaTitlesTool.Arguments) -> str:
            return self.list_titles(args.keyword)

        return _call


class WikipediaSearchTool(_WikipediaAPI):
    """Fetches the introductory extract of a Wikipedia page by exact title."""

    TOOL_DEFINITION: ToolDefinition = ToolDefinition(
        name="wikipedia_search",
        description=(
            "Get a short Wikipedia summary for an exact page title. "
            "The title must come from wikipedia_titles."
        ),
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Exact page title returned by wikipedia_titles",
                }
            },
            "required": ["query"],
        },
    )

    class Arguments(ToolArguments):
        query: str

    def search(self, query: str) -> str:
        """Return the page's plain-text intro, or an explanation."""
        query = query.strip()
        if not query:
            return "No query provided."

        logger.debug("Fetching Wikipedia extract for %r", query)
        try:
            data = self._query(
                {
                    "action": "query",
                    "prop": "extracts",
                    "exintro": "",
                    "explaintext": "",
                    "redirects": "",
                    "titles": query,
                }
            )
        except httpx.HTTPStatusError as exc:
            logger.error("Wikipedia API HTTP error: %s", exc)
            return (
                "Error searching Wikipedia: Wikipedia API returned "
                f"{exc.response.status_code}: {exc.response.text}"
            )
        except httpx.TransportError as exc:
            logger.error("Wikipedia API request failed: %s", exc)
            return f"Error searching Wikipedia: {exc}"
        except ValueError as exc:
            return f"Error searching Wikipedia: {exc}"

        pages = (data.get("query") or {}).get("pages") or {}
        for page in pages.values():
            extract = page.get("extract") if isinstance(page, dict) else None
            if not extract:
                return f"No summary found for '{query}'."
            return extract
        return f"No Wikipedia page found for '{query}'."

    def as_dispatcher_entry(self):
        def _call(args: WikipediaSearchTool.Arguments) -> str:
            return self.search(args.query)

        return _call
