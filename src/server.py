"""
YouTube Music MCP Server - Main server implementation.

Exposes a play_song tool via MCP protocol: searches YouTube for a song and
opens the top result on YouTube Music in the browser.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    ServerResult,
    TextContent,
    Tool,
)

from activity_log import ActivityLog
from launcher import Launcher, LaunchOutcome, LaunchStatus
from youtube_api import DEFAULT_TIMEOUT, YouTubeAPI


logger = logging.getLogger(__name__)

SERVER_NAME = "youtube-music-mcp"
PLAY_SONG = "play_song"

PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / ".env"


def _text_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)])


def _mcp_error(code: int, message: str) -> McpError:
    return McpError(ErrorData(code=code, message=message))


def build_query(song_name: str, artist_name: Optional[str] = None) -> str:
    """Search query for a song, with the artist appended when given."""
    return f"{song_name} {artist_name}" if artist_name else song_name


def validate_play_song_args(arguments: Any) -> tuple[str, Optional[str]]:
    """
    Check play_song arguments before anything touches the network.

    Returns:
        (song_name, artist_name) with artist_name None when absent

    Raises:
        McpError: INVALID_PARAMS when the arguments do not match the schema
    """
    if not isinstance(arguments, dict):
        raise _mcp_error(INVALID_PARAMS, "Invalid play_song arguments: expected an object")

    song_name = arguments.get("song_name")
    if not isinstance(song_name, str):
        raise _mcp_error(INVALID_PARAMS, "Invalid play_song arguments: song_name must be a string")
    if not song_name.strip():
        raise _mcp_error(INVALID_PARAMS, "Invalid play_song arguments: song_name must not be empty")

    artist_name = arguments.get("artist_name")
    if artist_name is not None and not isinstance(artist_name, str):
        raise _mcp_error(INVALID_PARAMS, "Invalid play_song arguments: artist_name must be a string")

    return song_name, artist_name


class YouTubeMusicServer:
    """YouTube Music MCP Server with a single play_song tool."""

    def __init__(
        self,
        youtube_api: YouTubeAPI,
        launcher: Optional[Launcher] = None,
        activity_log: Optional[ActivityLog] = None,
    ):
        self.youtube_api = youtube_api
        self.launcher = launcher or Launcher()
        self.activity_log = activity_log or ActivityLog()

        # MCP Server
        self.server = Server(SERVER_NAME)
        self._setup_handlers()

    def _setup_handlers(self):
        """Setup MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        # McpError raised here becomes the JSON-RPC error reply
        async def call_tool(req: CallToolRequest) -> ServerResult:
            return ServerResult(await self.call_tool(req.params.name, req.params.arguments))

        self.server.request_handlers[CallToolRequest] = call_tool

    def list_tools(self) -> list[Tool]:
        return [
            Tool(
                name=PLAY_SONG,
                description="Play a song on YouTube Music. Searches YouTube and opens the top result in the browser.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "song_name": {
                            "type": "string",
                            "description": "Name of the song to play",
                        },
                        "artist_name": {
                            "type": "string",
                            "description": "Name of the artist",
                        },
                    },
                    "required": ["song_name"],
                },
            ),
        ]

    async def call_tool(self, name: str, arguments: Any) -> CallToolResult:
        if name != PLAY_SONG:
            raise _mcp_error(METHOD_NOT_FOUND, f"Unknown tool: {name}")

        song_name, artist_name = validate_play_song_args(arguments)
        return await self._play_song(build_query(song_name, artist_name))

    async def _play_song(self, query: str) -> CallToolResult:
        """Handle play_song tool call."""
        self.activity_log.record(f"Searching for song: {query}")

        try:
            results = await asyncio.to_thread(self.youtube_api.search, query)
        except Exception as e:
            self.activity_log.record(f"Error searching for song: {e}", logging.ERROR)
            raise _mcp_error(INTERNAL_ERROR, f"Error searching for song: {e}") from e

        self.activity_log.record(f"Found {len(results)} result(s) for: {query}")

        if not results:
            return _text_result(f"No search results found for: {query}")

        top = results[0]
        url = top.music_url

        if not self.launcher.is_supported():
            self.activity_log.record(
                f"Automatic playback not supported on {self.launcher.platform}: {url}",
                logging.WARNING,
            )
            return _text_result(
                f"Found top result: {top.title}. Automatic playback is not supported "
                f"on {self.launcher.platform}; open {url} manually."
            )

        self.launcher.schedule(url, on_done=self._record_launch)
        self.activity_log.record(f"Launching {url}")
        return _text_result(f"Playing top result: {top.title}")

    def _record_launch(self, outcome: LaunchOutcome):
        if outcome.status == LaunchStatus.LAUNCHED:
            self.activity_log.record(f"Opened song in browser: {outcome.url}")
        else:
            self.activity_log.record(
                f"Error opening song in browser ({outcome.status.value}): {outcome.error}",
                logging.WARNING,
            )

    async def run(self):
        """Run the MCP server."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("YouTube Music MCP server running on stdio")
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.launcher.wait_pending()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def main():
    """Main entry point."""
    load_dotenv(ENV_FILE)

    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("YOUTUBE_MCP_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Get configuration from environment
    try:
        timeout = float(os.environ.get("YOUTUBE_MCP_TIMEOUT", str(DEFAULT_TIMEOUT)))
        youtube_api = YouTubeAPI(
            api_key=os.environ.get("YOUTUBE_API_KEY"),
            timeout=timeout,
            ssl_bypass=_env_flag("YOUTUBE_MCP_SSL_BYPASS"),
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    launcher = Launcher(browser=os.environ.get("YOUTUBE_MUSIC_BROWSER"))

    # Create and run server
    server = YouTubeMusicServer(youtube_api=youtube_api, launcher=launcher)

    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
