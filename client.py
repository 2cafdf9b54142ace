#!/usr/bin/env python3
"""
Interactive WebSocket client for the office assistant chat endpoint.

Sends each line typed as a chat message and prints the JSON reply.

Examples:
  python client.py --url ws://127.0.0.1:9000/ws --query "how do i set a reminder"
  python client.py --url ws://127.0.0.1:9000/ws               # interactive
"""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import List, Optional

import websockets


def _build_headers(args: argparse.Namespace) -> List[tuple[str, str]]:
    headers: List[tuple[str, str]] = []
    if args.auth:
        headers.append(("Authorization", args.auth))
    return headers


def _format_reply(raw: str) -> str:
    try:
        obj = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if "response" in obj:
        return f"[{obj.get('source', '?')}] {obj['response']}"
    return json.dumps(obj, ensure_ascii=False)


async def text_client(uri: str, query: Optional[str], headers: List[tuple[str, str]]) -> None:
    async with websockets.connect(uri, additional_headers=headers) as ws:
        if query is not None:
            await ws.send(json.dumps({"message": query}))
            print(_format_reply(await ws.recv()))
            return
        print("Connected. Type 'exit' to quit.")
        while True:
            try:
                text = input("you> ").strip()
            except (EOFError, KeyboardInterrupt):
                break
            if not text or text.lower() in {"exit", "quit"}:
                break
            await ws.send(json.dumps({"message": text}))
            print("bot>", _format_reply(await ws.recv()))


def main() -> None:
    parser = argparse.ArgumentParser(description="Client for the office assistant chat socket")
    parser.add_argument("--url", default="ws://127.0.0.1:9000/ws", help="WebSocket URL, e.g. ws://host:9000/ws")
    parser.add_argument("--query", default=None, help="One-shot message. Omit to enter interactive mode.")
    parser.add_argument("--auth", default=None, help="Authorization header if needed, e.g. 'Bearer xxx'")
    args = parser.parse_args()

    asyncio.run(text_client(args.url, args.query, _build_headers(args)))


if __name__ == "__main__":
    main()
