"""Interactive relay client: type ``receiver: text`` lines, see incoming messages."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat through a running relay.")
    parser.add_argument("user_id", help="Identity to connect as.")
    parser.add_argument("--url", default="ws://127.0.0.1:8080", help="Relay base URL.")
    parser.add_argument("--log-level", default="warning", help="Logging level.")
    return parser.parse_args()


async def _print_incoming(client) -> None:
    while True:
        message = await client.receive()
        print(f"[{message.timestamp:%H:%M:%S}] {message.sender}: {message.content}", flush=True)


async def _run(args: argparse.Namespace) -> None:
    from relay_api.client import RelayClient

    async with RelayClient(args.url, args.user_id) as client:
        reader = asyncio.create_task(_print_incoming(client))
        try:
            while True:
                line = await asyncio.to_thread(sys.stdin.readline)
                if not line:
                    break
                receiver, sep, content = line.rstrip("\n").partition(":")
                if not sep or not receiver.strip():
                    print("usage: <receiver>: <message>", file=sys.stderr)
                    continue
                await client.send(receiver.strip(), content.strip())
        finally:
            reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)


def main() -> None:
    args = parse_args()
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "relay" / "src"))
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
