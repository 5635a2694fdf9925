"""Command-line client: submit a generation job and follow its log."""
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from client.keywords import keywords_with_url, parse_keyword_lines
from client.poller import JobPoller
from shared.config import settings

logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate link-building articles in bulk.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--pairs-file", type=Path, help='File with one "keyword | URL" pair per line')
    source.add_argument("--keywords-file", type=Path, help="File with one keyword per line (requires --url)")
    parser.add_argument("--url", help="Website URL used for every keyword in --keywords-file")
    parser.add_argument("--provider", choices=["gemini", "groq"], default="gemini")
    parser.add_argument("--api-key", default=os.getenv("ARTICLE_API_KEY"),
                        help="Provider API key (default: $ARTICLE_API_KEY)")
    parser.add_argument("--per-keyword", type=int, default=1, help="Articles per keyword")
    parser.add_argument("--output", type=Path, default=Path("articles.zip"), help="Where to save the archive")
    parser.add_argument("--server", default=settings.api_base_url, help="API base URL")
    parser.add_argument("--interval", type=float, default=settings.poll_interval, help="Seconds between status polls")
    return parser


def build_payload(args: argparse.Namespace) -> dict:
    """Turn parsed arguments into a generation request body."""
    if args.pairs_file:
        keywords = parse_keyword_lines(args.pairs_file.read_text(encoding="utf-8"))
    else:
        if not args.url:
            raise ValueError("--url is required with --keywords-file")
        keywords = keywords_with_url(args.keywords_file.read_text(encoding="utf-8"), args.url)

    if not keywords:
        raise ValueError("Please enter at least one keyword")
    if not args.api_key or not args.api_key.strip():
        raise ValueError("API key is required (--api-key or ARTICLE_API_KEY)")
    if not 1 <= args.per_keyword <= settings.max_articles_per_keyword:
        raise ValueError(f"Articles per keyword must be between 1 and {settings.max_articles_per_keyword}")

    return {
        "keywords": keywords,
        "api_provider": args.provider,
        "api_key": args.api_key,
        "articles_per_keyword": args.per_keyword
    }


async def run(args: argparse.Namespace, payload: dict) -> int:
    failed = False
    async with JobPoller(base_url=args.server, poll_interval=args.interval) as poller:
        async for entry in poller.run(payload, dest=args.output):
            print(f"[{entry.timestamp}] {entry.message}")
            failed = failed or entry.type == "error"
    return 1 if failed else 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        payload = build_payload(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(run(args, payload))
    except KeyboardInterrupt:
        logger.warning("Interrupted; the job keeps running on the server")
        return 130


if __name__ == "__main__":
    sys.exit(main())
