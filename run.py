"""Command-line entry point for the Web Page Q&A application."""

import argparse
import asyncio
import logging
import sys

from src.config import AppConfig, load_config
from src.errors import RagError
from src.pipeline import RagPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Teach the assistant web pages, then ask questions about them."
    )
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    ingest = sub.add_parser("ingest", help="Fetch and index web pages")
    ingest.add_argument("urls", nargs="+")

    ask = sub.add_parser("ask", help="Ask a question about the indexed pages")
    ask.add_argument("question")
    ask.add_argument("--conversation-id", default=None)

    delete = sub.add_parser("delete", help="Remove a page from the index")
    delete.add_argument("url")

    sub.add_parser("stats", help="Show vector store statistics")
    return parser


async def run_command(args: argparse.Namespace, config: AppConfig) -> None:
    async with RagPipeline.from_config(config) as pipeline:
        if args.command == "ingest":
            for url in args.urls:
                result = await pipeline.ingest_url(url)
                print(f"{result.title}: {result.chunks_processed} chunks indexed")
        elif args.command == "ask":
            answer = await pipeline.answer(args.question, args.conversation_id)
            print(answer.response)
            if answer.sources:
                print("\nSources:")
                for source in answer.sources:
                    print(f"  - {source}")
            print(f"\nconversation: {answer.conversation_id}")
        elif args.command == "delete":
            await pipeline.delete_source(args.url)
            print(f"Removed {args.url}")
        elif args.command == "stats":
            stats = await pipeline.stats()
            print(f"Total vectors: {stats.total_count}")
            print(f"Dimension: {stats.dimension}")
            for name, count in stats.namespaces.items():
                print(f"  {name or 'default'}: {count} records")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging and run one command."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=config.logging.level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run_command(args, config))
    except RagError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
