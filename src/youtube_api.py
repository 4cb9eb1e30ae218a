"""
YouTube Data API Integration - Song search for YouTube Music playback.

Requires a YouTube Data API v3 key from Google Cloud Console.
Set the YOUTUBE_API_KEY environment variable or pass to constructor.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

import requests
import urllib3


logger = logging.getLogger(__name__)

MAX_RESULTS = 5
DEFAULT_TIMEOUT = 30.0

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
YOUTUBE_MUSIC_WATCH_URL = "https://music.youtube.com/watch?v={video_id}"


class YouTubeAPIError(Exception):
    """Raised when a search request fails or returns an unusable body."""


@dataclass
class SearchResult:
    """A single search result."""

    title: str
    video_id: str
    description: str = ""

    @property
    def music_url(self) -> str:
        return YOUTUBE_MUSIC_WATCH_URL.format(video_id=self.video_id)


class YouTubeAPI:
    """
    YouTube Data API v3 search client.

    Every call is a single GET with no retries; failures propagate as
    YouTubeAPIError.
    """

    BASE_URL = "https://www.googleapis.com/youtube/v3"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        ssl_bypass: bool = False,
    ):
        """
        Initialize YouTube API client.

        Args:
            api_key: YouTube Data API key. If not provided, reads from YOUTUBE_API_KEY env var.
            timeout: Request timeout in seconds
            ssl_bypass: Bypass SSL certificate verification (for corporate environments)
        """
        self.api_key = api_key or os.environ.get("YOUTUBE_API_KEY")
        self.timeout = timeout
        self.ssl_bypass = ssl_bypass
        self._session = None

        if not self.api_key:
            raise ValueError(
                "YouTube API key required. Set YOUTUBE_API_KEY environment variable "
                "or pass api_key parameter."
            )

    @property
    def session(self) -> requests.Session:
        """Lazy initialization of requests session."""
        if self._session is None:
            self._session = requests.Session()
            if self.ssl_bypass:
                urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
                self._session.verify = False
        return self._session

    def _request(self, endpoint: str, params: dict) -> dict:
        """Make API request and return the decoded JSON body."""
        params["key"] = self.api_key
        url = f"{self.BASE_URL}/{endpoint}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise YouTubeAPIError(f"Request to {endpoint} failed: {e}") from e

        if not response.ok:
            raise YouTubeAPIError(
                f"{endpoint} returned HTTP {response.status_code}: {_error_message(response)}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise YouTubeAPIError(f"{endpoint} returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise YouTubeAPIError(f"{endpoint} returned an unexpected body: {type(data).__name__}")
        return data

    def search(self, query: str) -> list[SearchResult]:
        """
        Search for videos on YouTube.

        Args:
            query: Search query

        Returns:
            Up to MAX_RESULTS results in the API's relevance order

        Raises:
            YouTubeAPIError: On transport failure, non-2xx status or malformed body
        """
        params = {
            "part": "snippet",
            "type": "video",
            "maxResults": MAX_RESULTS,
            "q": query,
        }

        data = self._request("search", params)

        items = data.get("items")
        if not isinstance(items, list):
            raise YouTubeAPIError("Malformed search response: 'items' is missing or not a list")

        results = [_parse_item(item) for item in items[:MAX_RESULTS]]
        logger.debug("Search %r returned %d result(s)", query, len(results))
        return results


def _parse_item(item) -> SearchResult:
    """Map one raw search item onto a SearchResult."""
    if not isinstance(item, dict):
        raise YouTubeAPIError("Malformed search response: item is not an object")

    snippet = item.get("snippet")
    ids = item.get("id")
    if not isinstance(snippet, dict) or not isinstance(ids, dict):
        raise YouTubeAPIError("Malformed search response: item lacks 'snippet' or 'id'")

    title = snippet.get("title")
    video_id = ids.get("videoId")
    if not isinstance(title, str) or not isinstance(video_id, str):
        raise YouTubeAPIError("Malformed search response: item lacks a title or videoId")

    # The ID ends up inside a launch command, so only the documented alphabet is accepted
    if not VIDEO_ID_PATTERN.match(video_id):
        raise YouTubeAPIError(f"Malformed search response: invalid videoId {video_id!r}")

    return SearchResult(
        title=title,
        video_id=video_id,
        description=snippet.get("description") or "",
    )


def _error_message(response: requests.Response) -> str:
    """Pull Google's error message out of a failed response, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or "unknown error"

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    return response.reason or "unknown error"
