#!/usr/bin/env python3
"""
eCFR Dashboard — launch the web interface.

Usage:
    python main.py                                    # http://127.0.0.1:3000
    python main.py --port 9000                        # http://127.0.0.1:9000
    python main.py --host 0.0.0.0                     # listen on all interfaces
    python main.py --api-base http://backend:8080/api # point at another scoring backend
    python main.py --reload                           # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import sys
import threading
import webbrowser

from utils.config import DEFAULT_API_BASE_URL


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the eCFR regulations dashboard.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "3000")),
        help="Port to listen on (default: 3000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--api-base", default=None,
        help=f"Base URL of the RSCS backend (default: {DEFAULT_API_BASE_URL} "
             "or ECFR_API_BASE_URL env var)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    args = parser.parse_args()

    # The app reads its backend from the environment at import time.
    if args.api_base:
        os.environ["ECFR_API_BASE_URL"] = args.api_base
    os.environ["APP_HOST"] = args.host
    os.environ["APP_PORT"] = str(args.port)

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn is not installed.")
        print("  pip install uvicorn[standard]")
        sys.exit(1)

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting eCFR Dashboard at {url}")
    print(f"Backend: {os.getenv('ECFR_API_BASE_URL', DEFAULT_API_BASE_URL)}")
    print()

    if not args.no_browser:
        # Give the server a moment to bind before opening the page.
        threading.Timer(1.5, webbrowser.open, args=(url,)).start()

    uvicorn.run(
        "web.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
