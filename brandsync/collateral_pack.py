from __future__ import annotations

import datetime as _dt
import json
import logging
import re
from pathlib import Path

from .asset_html import generate_asset_html, has_generator
from .catalog import list_asset_types
from .render_client import render_filename
from .schemas import BrandState
from .session import seed_fields

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"[^a-z0-9-_]")


def _sanitize_id(value: str) -> str:
    value = (value or "").strip().lower().replace(" ", "-")
    value = _SAFE_ID_RE.sub("", value)
    return value


def _pack_dir(base_dir: Path, brand: BrandState) -> Path:
    safe = _sanitize_id(brand.name) or "brand"
    return base_dir / safe / "collateral"


def export_collateral_pack(
    brand: BrandState,
    base_dir: str | Path,
    *,
    dark: bool = False,
) -> dict[str, str]:
    """
    Writes every catalog template for a brand under:
      `<base_dir>/<brand>/collateral/<asset>-<template>[-dark].html`

    Field values are seeded from the brand the same way an editor session is,
    so the pack mirrors what a freshly opened editor would show. Templates
    without a bespoke layout are skipped rather than exported as fallbacks.
    """
    out_dir = _pack_dir(Path(base_dir), brand)
    out_dir.mkdir(parents=True, exist_ok=True)

    now = _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0).isoformat()

    def write_text(name: str, text: str) -> None:
        (out_dir / name).write_text(text, encoding="utf-8")

    files: dict[str, str] = {}
    for asset in list_asset_types():
        fields = seed_fields(asset, brand)
        for template in asset.templates:
            if not has_generator(asset, template.id):
                logger.warning("Skipping %s: no layout registered", asset.registry_key(template.id))
                continue
            filename = f"{render_filename(asset.id, template.id, dark)}.html"
            write_text(filename, generate_asset_html(asset, template.id, fields, brand.logo, dark))
            files[asset.registry_key(template.id)] = filename

    manifest = {
        "generatedAt": now,
        "brand": {"name": brand.name, "tagline": brand.tagline},
        "dark": dark,
        "files": files,
        "source": "brandsync collateral_pack exporter",
    }
    write_text("manifest.json", json.dumps(manifest, indent=2))
    logger.info("Exported %d documents to %s", len(files), out_dir)

    return {key: str(out_dir / name) for key, name in files.items()}
