#!/usr/bin/env python3
"""Command-line interface for AskTabs.

    asktabs serve [--host HOST] [--port PORT] [--reload]
    asktabs refresh
    asktabs ask "what tabs are open" [--keyword]
"""

import argparse
import asyncio
import sys

from asktabs.app_utils.logging_config import configure_logging


async def _refresh() -> int:
    from asktabs.api.deps import get_aggregator, get_gateway
    from asktabs.core.errors import TabEnumerationError

    try:
        snapshot = await get_aggregator().refresh()
    except TabEnumerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await get_gateway().close()

    stats = snapshot.stats
    print(
        f"{stats.total} tabs: {stats.successful} with content, "
        f"{stats.summarized} summarized, {stats.failed} failed"
    )
    for tab in snapshot.tabs:
        marker = "+" if tab.has_content else "-"
        reason = f" ({tab.error.value})" if tab.error else ""
        print(f"  {marker} {tab.title} <{tab.url}>{reason}")
    return 0


async def _ask(question: str, keyword: bool) -> int:
    from asktabs.api.deps import get_answer_synthesizer, get_ask_service, get_gateway

    try:
        result = await get_ask_service().ask(
            question, mode="keyword" if keyword else "auto"
        )
    finally:
        await get_gateway().close()
        client = get_answer_synthesizer().client
        if client is not None:
            await client.close()

    print(result.answer)
    if result.citations:
        print("\nSources:")
        for citation in result.citations:
            print(f"  - {citation.title} <{citation.url}>")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="asktabs", description="Ask questions about your open browser tabs"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8765)
    serve_parser.add_argument("--reload", action="store_true")

    subparsers.add_parser("refresh", help="Read all open tabs and print a summary")

    ask_parser = subparsers.add_parser("ask", help="Ask a question about open tabs")
    ask_parser.add_argument("question")
    ask_parser.add_argument(
        "--keyword",
        action="store_true",
        help="Skip the remote answering service and rank tabs by keywords",
    )

    args = parser.parse_args(argv)

    if args.command != "serve":
        configure_logging("WARNING")

    if args.command == "serve":
        from asktabs.api.main import serve

        serve(args.host, args.port, args.reload)
        return 0
    if args.command == "refresh":
        return asyncio.run(_refresh())
    return asyncio.run(_ask(args.question, args.keyword))


if __name__ == "__main__":
    sys.exit(main())
