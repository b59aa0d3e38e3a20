"""
Launch the BrandSync dashboard under uvicorn.

The brand store and rendering service endpoints can be given on the command
line; they are exported as BS_* variables before the app is imported so the
settings object picks them up.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the BrandSync dashboard via uvicorn.")
    parser.add_argument("--host", default=os.environ.get("BS_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("BS_PORT", 8000)))
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BS_LOG_LEVEL", "info").lower(),
        choices=["critical", "error", "warning", "info", "debug"],
    )
    parser.add_argument("--brand-store-url", default=None, help="Overrides BS_BRAND_STORE_URL")
    parser.add_argument("--render-service-url", default=None, help="Overrides BS_RENDER_SERVICE_URL")
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        help="Enable uvicorn reload for local template work.",
    )
    parser.set_defaults(reload=False)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    project_root = Path(__file__).resolve().parents[1]
    os.chdir(project_root)

    os.environ["BS_LOG_LEVEL"] = args.log_level.upper()
    if args.brand_store_url:
        os.environ["BS_BRAND_STORE_URL"] = args.brand_store_url
    if args.render_service_url:
        os.environ["BS_RENDER_SERVICE_URL"] = args.render_service_url

    uvicorn.run(
        "brandsync.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
