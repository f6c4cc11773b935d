#!/usr/bin/env python3
"""
Startup script for the Seattle Events API server.

Usage:
    python start_api.py              # Development mode
    python start_api.py --prod       # Production mode
    python start_api.py --port 8080  # Custom port

Requires TAVILY_API_KEY in the environment or in .env.local.
"""

import argparse
import logging
import os
import sys

import uvicorn

from ingest.config import ConfigurationError, require_api_key

logger = logging.getLogger("start_api")


def main():
    """Start the FastAPI server with configurable options."""
    os.environ.setdefault("WATCHFILES_FORCE_POLLING", "1")
    parser = argparse.ArgumentParser(description="Start the Seattle Events API")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "3001")),
        help="Port to bind to (default: $PORT or 3001)"
    )
    parser.add_argument(
        "--prod",
        action="store_true",
        help="Run in production mode (no auto-reload)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload to reduce CPU usage"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if os.getenv("SCRAPER_DEBUG") else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        require_api_key()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    if args.prod:
        logger.info("Starting Seattle Events API in PRODUCTION mode on http://%s:%s with %d worker(s)",
                    args.host, args.port, args.workers)
        uvicorn.run(
            "api.main:app",
            host=args.host,
            port=args.port,
            workers=args.workers,
            log_level="info",
            loop="asyncio",
            http="h11"
        )
    else:
        reload_enabled = not args.no_reload
        logger.info("Starting Seattle Events API in DEVELOPMENT mode on http://%s:%s (reload %s)",
                    args.host, args.port, "on" if reload_enabled else "off")
        logger.info("API docs: http://%s:%s/docs", args.host, args.port)

        uvicorn_config = {
            "app": "api.main:app",
            "host": args.host,
            "port": args.port,
            "log_level": "debug",
            "loop": "asyncio",
            "http": "h11"
        }

        if reload_enabled:
            uvicorn_config.update({
                "reload": True,
                "reload_dirs": ["api", "ingest", "scrapers"],
                "reload_delay": 1.0
            })

        uvicorn.run(**uvicorn_config)


if __name__ == "__main__":
    main()
