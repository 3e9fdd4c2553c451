#!/usr/bin/env python3
"""Send a signed query to a running agent, the way the marketplace does.

Usage:
    python3 send_query.py --url http://localhost:3000 --secret your-secret "What is 2+2?"
"""

from __future__ import annotations

import argparse
import json
import uuid

import httpx

from mt_sdk.protocol import SIGNATURE_HEADER, sign_payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a signed MT query")
    parser.add_argument("text", help="Query text")
    parser.add_argument("--url", default="http://localhost:3000", help="Agent base URL")
    parser.add_argument("--secret", required=True, help="Webhook secret shared with the agent")
    args = parser.parse_args()

    raw = json.dumps({"query_id": str(uuid.uuid4()), "query": args.text}).encode("utf-8")
    resp = httpx.post(
        f"{args.url.rstrip('/')}/query",
        content=raw,
        headers={
            "Content-Type": "application/json",
            SIGNATURE_HEADER: sign_payload(raw, args.secret),
        },
        timeout=30.0,
    )
    print(resp.status_code, json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
