"""Start the relay API under uvicorn using ``RELAY_API_*`` settings."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from relay_api.config.settings import RelayApiSettings, get_api_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_args(defaults: RelayApiSettings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the relay API.")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--reload", action="store_true", default=defaults.reload)
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        default=(defaults.log_level or "info").lower(),
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args(get_api_settings())

    level = getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger(__name__).info("Relay API listening on %s:%d", args.host, args.port)

    uvicorn.run(
        "relay_api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        log_config=None,
    )


if __name__ == "__main__":
    main()
