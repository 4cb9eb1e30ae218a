"""
YouTube Music CLI - Search and play songs from the command line.

Usage:
    youtube-music "Bohemian Rhapsody" --artist Queen     # Play top result
    youtube-music "Bohemian Rhapsody" --search-only      # List results
    youtube-music "Bohemian Rhapsody" --dry-run          # Show launch command
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from launcher import Launcher, LaunchStatus
from server import ENV_FILE, build_query
from youtube_api import DEFAULT_TIMEOUT, YouTubeAPI, YouTubeAPIError


class CLI:
    """Command-line interface for YouTube Music playback."""

    def __init__(self, youtube_api: YouTubeAPI, launcher: Launcher):
        self.youtube_api = youtube_api
        self.launcher = launcher

    def search(self, query: str) -> int:
        """Print search results for a query."""
        try:
            results = self.youtube_api.search(query)
        except YouTubeAPIError as e:
            print(f"[FAIL] {e}", file=sys.stderr)
            return 1

        if not results:
            print(f"No search results found for: {query}")
            return 0

        print("=" * 60)
        print(f"Results for: {query}")
        print("=" * 60)
        for i, result in enumerate(results, 1):
            print(f"  {i}. {result.title}")
            print(f"     {result.music_url}")
        print(f"[OK] Found {len(results)} result(s)")
        return 0

    def play(self, query: str, dry_run: bool = False) -> int:
        """Search for a song and open the top result."""
        try:
            results = self.youtube_api.search(query)
        except YouTubeAPIError as e:
            print(f"[FAIL] {e}", file=sys.stderr)
            return 1

        if not results:
            print(f"No search results found for: {query}")
            return 0

        top = results[0]
        print(f"Top result: {top.title}")
        print(f"URL: {top.music_url}")

        if not self.launcher.is_supported():
            print(f"Automatic playback is not supported on {self.launcher.platform}; open the URL manually.")
            return 1

        if dry_run:
            print(f"Command: {self.launcher.build_command(top.music_url)}")
            return 0

        outcome = asyncio.run(self.launcher.launch(top.music_url))
        if outcome.status == LaunchStatus.LAUNCHED:
            print(f"[OK] Playing top result: {top.title}")
            return 0

        print(f"[FAIL] Could not open browser: {outcome.error}", file=sys.stderr)
        return 1


def main(argv=None):
    """Main entry point."""
    load_dotenv(ENV_FILE)

    parser = argparse.ArgumentParser(
        description="Search YouTube and play songs on YouTube Music",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "song",
        type=str,
        help="Name of the song to play",
    )
    parser.add_argument(
        "--artist",
        "-a",
        type=str,
        help="Name of the artist",
    )
    parser.add_argument(
        "--search-only",
        "-s",
        action="store_true",
        help="List search results without opening anything",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show the launch command instead of running it",
    )
    parser.add_argument(
        "--browser",
        "-b",
        type=str,
        default=os.environ.get("YOUTUBE_MUSIC_BROWSER"),
        help="Browser to open (default: Google Chrome on macOS, chrome on Windows)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if not args.song.strip():
        parser.error("song must not be empty")

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        youtube_api = YouTubeAPI(
            timeout=float(os.environ.get("YOUTUBE_MCP_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    cli = CLI(youtube_api=youtube_api, launcher=Launcher(browser=args.browser))
    query = build_query(args.song, args.artist)

    if args.search_only:
        return cli.search(query)
    return cli.play(query, dry_run=args.dry_run)


if __name__ == "__main__":
    sys.exit(main())
