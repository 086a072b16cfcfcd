"""HTTP RSS feed fetcher implementation."""

import httpx
import structlog

from gator.exceptions import BodyError, TransportError
from gator.models.rss import ParsedFeed
from gator.parsers.base import FeedParser
from gator.parsers.rss_parser import RSSParser

logger = structlog.get_logger()


class RSSFeedFetcher:
    """Fetches RSS documents over HTTP and parses them."""

    def __init__(
        self,
        parser: FeedParser | None = None,
        timeout: int = 30,
        user_agent: str = "Gator",
    ):
        """Initialize the fetcher.

        Args:
            parser: Parser for the downloaded document. Defaults to RSSParser.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header for requests.
        """
        self._parser = parser or RSSParser()
        self._timeout = timeout
        self._user_agent = user_agent

    async def fetch(self, url: str) -> ParsedFeed:
        """Fetch and parse the feed at ``url``.

        Raises:
            TransportError: On network failure, timeout or non-2xx status.
            BodyError: When the body cannot be read or decoded.
            ParseError: When the document is not a usable feed.
        """
        raw_content = await self.fetch_raw(url)
        feed = self._parser.parse(raw_content, url)
        logger.debug("Feed parsed", url=url, item_count=len(feed.items))
        return feed

    async def fetch_raw(self, url: str) -> bytes:
        """Download the raw feed document.

        Returns bytes so the parser can honor the document's own encoding
        declaration.
        """
        headers = {"User-Agent": self._user_agent}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                return response.content
        except httpx.TimeoutException as e:
            raise TransportError(url, f"Request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise TransportError(url, f"HTTP {e.response.status_code}") from e
        except (httpx.DecodingError, httpx.StreamError) as e:
            raise BodyError(url, f"Unreadable response body: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(url, f"Request failed: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportError(url, f"Invalid URL: {e}") from e
