#!/usr/bin/env python3
"""MT Echo Agent -- minimal marketplace agent.

Answers every forwarded query by echoing its text back, with the
capabilities the marketplace asked for in the response metadata.

Usage:
    MT_API_KEY=mt_xxx MT_WEBHOOK_SECRET=your-secret python3 agent.py --port 3000
"""

from __future__ import annotations

import argparse

from mt_sdk import MTAgent, Query, QueryResult


def main() -> None:
    parser = argparse.ArgumentParser(description="MT Echo Agent")
    parser.add_argument("--port", type=int, default=None, help="Listen port (default: MT_PORT or 3000)")
    parser.add_argument("--require-signature", action="store_true", help="Reject unsigned queries")
    args = parser.parse_args()

    agent = MTAgent(port=args.port, require_signature=args.require_signature or None)

    @agent.on_query
    async def echo(query: Query) -> QueryResult:
        return QueryResult(
            response=f"You asked: {query.text}",
            metadata={"capabilities": list(query.capabilities)},
        )

    agent.run()


if __name__ == "__main__":
    main()
