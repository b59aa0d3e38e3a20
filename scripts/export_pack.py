"""
Export every catalog template for the saved brand as standalone HTML files.

Usage:
  python scripts/export_pack.py --out generated --dark
  python scripts/export_pack.py --offline   # skip the brand store, use defaults
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from brandsync.brand_store import BrandStoreClient  # noqa: E402
from brandsync.collateral_pack import export_collateral_pack  # noqa: E402
from brandsync.config import get_settings  # noqa: E402
from brandsync.schemas import BrandState  # noqa: E402
from brandsync.session import BrandWorkspace  # noqa: E402


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Export the BrandSync collateral pack.")
    parser.add_argument("--out", default=settings.pack_output_dir, help="Base output directory")
    parser.add_argument("--dark", action="store_true", help="Use the dark palette")
    parser.add_argument("--offline", action="store_true", help="Do not contact the brand store")
    return parser.parse_args()


async def _load_brand(offline: bool) -> BrandState:
    if offline:
        return BrandState.defaults()
    workspace = BrandWorkspace(BrandStoreClient())
    return await workspace.load()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    args = parse_args()
    brand = asyncio.run(_load_brand(args.offline))
    paths = export_collateral_pack(brand, args.out, dark=args.dark)
    for key, path in sorted(paths.items()):
        print(f"{key:<28} {path}")


if __name__ == "__main__":
    main()
