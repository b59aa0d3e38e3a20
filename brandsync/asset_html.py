"""
Print-accurate HTML generators for every (asset type, template) pair.

Each generator is a pure function of its inputs and returns a complete,
standalone document sized to the asset's physical dimensions. Lookups that
miss the registry resolve to a fallback page instead of failing.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from .schemas import AssetTypeConfig

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Template preview not available"
EMPTY_ITEMS_MESSAGE = "No items"


@dataclass(frozen=True)
class Palette:
    bg: str
    name: str
    secondary: str
    detail: str
    muted: str
    placeholder: str
    accent: str
    rule: str


# Print-safe colors: no pure black on white, contrast kept for both screen and paper.
LIGHT = Palette(
    bg="#ffffff",
    name="#1a1a1a",
    secondary="#4d4d4d",
    detail="#595959",
    muted="#808080",
    placeholder="#cccccc",
    accent="#1a56db",
    rule="#cccccc",
)

DARK = Palette(
    bg="#09090b",
    name="#fafafa",
    secondary="#a1a1aa",
    detail="#71717a",
    muted="#52525b",
    placeholder="#3f3f46",
    accent="#2563eb",
    rule="#27272a",
)


def palette_for(dark: bool) -> Palette:
    return DARK if dark else LIGHT


def esc(value: Optional[str]) -> str:
    """Escape &, <, >, " and ' so field text can never alter document structure."""
    return html.escape(value or "", quote=True)


def split_lines(value: Optional[str]) -> list[str]:
    """Split a multi-line field into its non-blank lines."""
    if not value:
        return []
    normalized = value.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in normalized.split("\n") if line.strip()]


def _print_reset(width: str, height: str, bg: str) -> str:
    return f"""
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    @page {{ size: {width} {height}; margin: 0; }}
    html, body {{
      width: {width}; height: {height};
      margin: 0; padding: 0; background: {bg};
      -webkit-print-color-adjust: exact;
      print-color-adjust: exact;
      color-adjust: exact;
    }}
    body {{ font-family: system-ui, -apple-system, sans-serif; }}
    """


def _logo_img(logo: Optional[str], max_h: str, max_w: str) -> str:
    if not logo:
        return ""
    return f'<img src="{esc(logo)}" alt="Logo" style="max-height:{max_h};max-width:{max_w};object-fit:contain;">'


def _wrap(width: str, height: str, bg: str, css: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html><head><meta charset="UTF-8"><style>
{_print_reset(width, height, bg)}
{css}
</style></head><body>{body}</body></html>"""


@dataclass(frozen=True)
class GenerateOptions:
    asset: AssetTypeConfig
    template_id: str
    fields: Mapping[str, str] = field(default_factory=dict)
    logo: Optional[str] = None
    dark: bool = False

    @property
    def palette(self) -> Palette:
        return palette_for(self.dark)

    def text(self, key: str) -> str:
        """Escaped value of a field; missing values render as an empty string."""
        return esc(self.fields.get(key))

    def wrap(self, css: str, body: str) -> str:
        return _wrap(self.asset.width, self.asset.height, self.palette.bg, css, body)


GeneratorFn = Callable[[GenerateOptions], str]

_GENERATORS: dict[str, GeneratorFn] = {}


def _register(asset_id: str, template_id: str) -> Callable[[GeneratorFn], GeneratorFn]:
    def decorator(fn: GeneratorFn) -> GeneratorFn:
        _GENERATORS[f"{asset_id}::{template_id}"] = fn
        return fn

    return decorator


def registered_keys() -> list[str]:
    return sorted(_GENERATORS)


def has_generator(asset: AssetTypeConfig, template_id: str) -> bool:
    return asset.registry_key(template_id) in _GENERATORS


def generate_asset_html(
    asset: AssetTypeConfig,
    template_id: str,
    fields: Optional[Mapping[str, str]] = None,
    logo: Optional[str] = None,
    dark: bool = False,
) -> str:
    opts = GenerateOptions(
        asset=asset,
        template_id=template_id,
        fields=dict(fields or {}),
        logo=logo or None,
        dark=bool(dark),
    )
    generator = _GENERATORS.get(asset.registry_key(template_id))
    if generator is None:
        logger.debug("No generator for %s, using fallback", asset.registry_key(template_id))
        return fallback_html(opts)
    return generator(opts)


def fallback_html(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    return opts.wrap(
        f"""
    .page {{ width:{a.width}; height:{a.height}; background:{c.bg}; display:flex; align-items:center; justify-content:center; }}
    .msg {{ font-size:14px; color:{c.muted}; }}
    """,
        f'<div class="page"><p class="msg">{FALLBACK_MESSAGE}</p></div>',
    )


# ---------------------------------------------------------------------------
# Business cards
# ---------------------------------------------------------------------------


@_register("business-card", "modern")
def _business_card_modern(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    return opts.wrap(
        f"""
    .card {{ width:{a.width}; height:{a.height}; background:{c.bg}; display:flex; flex-direction:column; justify-content:space-between; padding:16px; }}
    .top {{ display:flex; align-items:flex-start; justify-content:space-between; }}
    .accent {{ width:32px; height:4px; background:{c.accent}; margin-top:8px; }}
    .name {{ font-size:14px; font-weight:600; color:{c.name}; margin-bottom:2px; }}
    .sub {{ font-size:11px; color:{c.secondary}; margin-bottom:2px; }}
    .tagline {{ font-size:11px; color:{c.secondary}; margin-bottom:8px; }}
    .contact {{ font-size:11px; color:{c.detail}; line-height:1.4; }}
    """,
        f"""<div class="card">
    <div class="top">{_logo_img(opts.logo, "32px", "80px")}<div class="accent"></div></div>
    <div>
      <div class="name">{t("name")}</div>
      <div class="sub">{t("title")}</div>
      <div class="tagline">{t("tagline")}</div>
      <div class="contact"><p>{t("email")}</p><p>{t("phone")}</p></div>
    </div>
  </div>""",
    )


@_register("business-card", "bold")
def _business_card_bold(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    stripe = c.accent if opts.dark else c.name
    return opts.wrap(
        f"""
    .card {{ width:{a.width}; height:{a.height}; background:{c.bg}; display:flex; overflow:hidden; }}
    .stripe {{ width:8px; background:{stripe}; flex-shrink:0; }}
    .content {{ flex:1; display:flex; flex-direction:column; justify-content:center; padding:12px 16px; }}
    .logo-row {{ display:flex; align-items:center; gap:8px; margin-bottom:8px; }}
    .name {{ font-size:14px; font-weight:700; color:{c.name}; text-transform:uppercase; letter-spacing:0.05em; }}
    .sub {{ font-size:11px; color:{c.secondary}; margin-bottom:2px; }}
    .tagline {{ font-size:11px; color:{c.secondary}; margin-bottom:8px; }}
    .contact {{ display:flex; gap:16px; font-size:11px; color:{c.detail}; }}
    """,
        f"""<div class="card">
    <div class="stripe"></div>
    <div class="content">
      <div class="logo-row">{_logo_img(opts.logo, "24px", "64px")}</div>
      <div class="name">{t("name")}</div>
      <div class="sub">{t("title")}</div>
      <div class="tagline">{t("tagline")}</div>
      <div class="contact"><span>{t("email")}</span><span>{t("phone")}</span></div>
    </div>
  </div>""",
    )


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


@_register("envelope", "classic")
def _envelope_classic(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    return opts.wrap(
        f"""
    .env {{ width:{a.width}; height:{a.height}; background:{c.bg}; padding:24px 32px; position:relative; }}
    .from {{ position:absolute; top:24px; left:32px; }}
    .from-name {{ font-size:12px; font-weight:600; color:{c.name}; margin-bottom:2px; }}
    .from-addr {{ font-size:10px; color:{c.detail}; white-space:pre-line; }}
    .to {{ position:absolute; top:50%; left:50%; transform:translate(-50%,-30%); text-align:center; }}
    .to-name {{ font-size:14px; font-weight:600; color:{c.name}; margin-bottom:4px; }}
    .to-addr {{ font-size:12px; color:{c.detail}; white-space:pre-line; }}
    .rule {{ position:absolute; bottom:24px; left:32px; right:32px; height:1px; background:{c.rule}; }}
    """,
        f"""<div class="env">
    <div class="from">
      {_logo_img(opts.logo, "32px", "90px")}
      <div class="from-name">{t("fromName")}</div>
      <div class="from-addr">{t("fromAddress")}</div>
    </div>
    <div class="to">
      <div class="to-name">{t("toName")}</div>
      <div class="to-addr">{t("toAddress")}</div>
    </div>
    <div class="rule"></div>
  </div>""",
    )


@_register("envelope", "modern")
def _envelope_modern(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    return opts.wrap(
        f"""
    .env {{ width:{a.width}; height:{a.height}; background:{c.bg}; padding:24px 32px; display:flex; flex-direction:column; justify-content:space-between; }}
    .top {{ display:flex; align-items:center; gap:12px; }}
    .accent {{ width:40px; height:3px; background:{c.accent}; }}
    .from-name {{ font-size:11px; font-weight:600; color:{c.name}; }}
    .from-addr {{ font-size:9px; color:{c.detail}; white-space:pre-line; }}
    .center {{ text-align:center; padding:0 60px; }}
    .to-name {{ font-size:14px; font-weight:600; color:{c.name}; margin-bottom:4px; }}
    .to-addr {{ font-size:12px; color:{c.detail}; white-space:pre-line; }}
    .bottom {{ height:2px; background:{c.accent}; }}
    """,
        f"""<div class="env">
    <div class="top">
      {_logo_img(opts.logo, "28px", "80px")}
      <div>
        <div class="from-name">{t("fromName")}</div>
        <div class="from-addr">{t("fromAddress")}</div>
      </div>
    </div>
    <div class="center">
      <div class="to-name">{t("toName")}</div>
      <div class="to-addr">{t("toAddress")}</div>
    </div>
    <div class="bottom"></div>
  </div>""",
    )


# ---------------------------------------------------------------------------
# Letterheads
# ---------------------------------------------------------------------------


def _body_lines(count: int) -> str:
    return "".join(['<div class="body-line"></div>'] * count)


@_register("letterhead", "simple")
def _letterhead_simple(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    return opts.wrap(
        f"""
    .page {{ width:{a.width}; height:{a.height}; background:{c.bg}; display:flex; flex-direction:column; }}
    .header {{ padding:32px 48px 16px; display:flex; justify-content:space-between; align-items:flex-start; border-bottom:2px solid {c.accent}; }}
    .brand {{ display:flex; align-items:center; gap:12px; }}
    .co-name {{ font-size:18px; font-weight:700; color:{c.name}; }}
    .co-tag {{ font-size:10px; color:{c.secondary}; margin-top:2px; }}
    .contact-col {{ text-align:right; font-size:9px; color:{c.detail}; line-height:1.5; }}
    .body {{ flex:1; padding:32px 48px; }}
    .body-line {{ width:100%; height:1px; background:{c.rule}; margin-bottom:18px; opacity:0.4; }}
    .footer {{ padding:16px 48px; border-top:1px solid {c.rule}; font-size:8px; color:{c.muted}; text-align:center; }}
    """,
        f"""<div class="page">
    <div class="header">
      <div class="brand">
        {_logo_img(opts.logo, "36px", "90px")}
        <div><div class="co-name">{t("companyName")}</div><div class="co-tag">{t("tagline")}</div></div>
      </div>
      <div class="contact-col">
        <div>{t("address")}</div>
        <div>{t("phone")}</div>
        <div>{t("email")}</div>
        <div>{t("website")}</div>
      </div>
    </div>
    <div class="body">{_body_lines(20)}</div>
    <div class="footer">{t("companyName")} &bull; {t("address")}</div>
  </div>""",
    )


@_register("letterhead", "formal")
def _letterhead_formal(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    return opts.wrap(
        f"""
    .page {{ width:{a.width}; height:{a.height}; background:{c.bg}; display:flex; flex-direction:column; }}
    .top-bar {{ height:6px; background:{c.accent}; }}
    .header {{ padding:24px 48px; display:flex; justify-content:space-between; align-items:center; }}
    .brand {{ display:flex; align-items:center; gap:10px; }}
    .co-name {{ font-size:20px; font-weight:700; color:{c.name}; letter-spacing:0.02em; }}
    .co-tag {{ font-size:9px; color:{c.secondary}; text-transform:uppercase; letter-spacing:0.1em; margin-top:2px; }}
    .contact-col {{ text-align:right; font-size:9px; color:{c.detail}; line-height:1.6; }}
    .rule {{ height:1px; background:{c.rule}; margin:0 48px; }}
    .body {{ flex:1; padding:28px 48px; }}
    .body-line {{ width:100%; height:1px; background:{c.rule}; margin-bottom:18px; opacity:0.3; }}
    .footer {{ padding:16px 48px; display:flex; justify-content:space-between; font-size:8px; color:{c.muted}; border-top:1px solid {c.rule}; }}
    """,
        f"""<div class="page">
    <div class="top-bar"></div>
    <div class="header">
      <div class="brand">
        {_logo_img(opts.logo, "40px", "100px")}
        <div><div class="co-name">{t("companyName")}</div><div class="co-tag">{t("tagline")}</div></div>
      </div>
      <div class="contact-col">
        <div>{t("address")}</div>
        <div>{t("phone")} &bull; {t("email")}</div>
        <div>{t("website")}</div>
      </div>
    </div>
    <div class="rule"></div>
    <div class="body">{_body_lines(22)}</div>
    <div class="footer"><span>{t("companyName")}</span><span>{t("website")}</span></div>
  </div>""",
    )


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------


@_register("invoice", "clean")
def _invoice_clean(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    rows = "".join(f"<tr><td>{esc(line)}</td></tr>" for line in split_lines(opts.fields.get("items")))
    if not rows:
        rows = f'<tr><td style="opacity:0.4">{EMPTY_ITEMS_MESSAGE}</td></tr>'
    return opts.wrap(
        f"""
    .page {{ width:{a.width}; height:{a.height}; background:{c.bg}; padding:40px 48px; display:flex; flex-direction:column; }}
    .top {{ display:flex; justify-content:space-between; align-items:flex-start; margin-bottom:24px; }}
    .brand {{ display:flex; align-items:center; gap:10px; }}
    .co-name {{ font-size:16px; font-weight:700; color:{c.name}; }}
    .co-addr {{ font-size:9px; color:{c.detail}; margin-top:2px; }}
    .inv-title {{ font-size:22px; font-weight:700; color:{c.accent}; text-align:right; }}
    .inv-meta {{ font-size:10px; color:{c.detail}; text-align:right; margin-top:4px; }}
    .parties {{ display:flex; gap:40px; margin-bottom:20px; padding-bottom:16px; border-bottom:1px solid {c.rule}; }}
    .party-label {{ font-size:8px; color:{c.muted}; text-transform:uppercase; letter-spacing:0.08em; margin-bottom:4px; }}
    .party-name {{ font-size:12px; font-weight:600; color:{c.name}; }}
    .party-addr {{ font-size:10px; color:{c.detail}; white-space:pre-line; }}
    .table {{ width:100%; border-collapse:collapse; margin-bottom:16px; flex:1; }}
    .table th {{ text-align:left; font-size:9px; color:{c.muted}; text-transform:uppercase; letter-spacing:0.06em; padding:6px 0; border-bottom:2px solid {c.accent}; }}
    .table td {{ font-size:10px; color:{c.detail}; padding:6px 0; border-bottom:1px solid {c.rule}; }}
    .total-row {{ display:flex; justify-content:flex-end; gap:24px; padding:12px 0; border-top:2px solid {c.accent}; }}
    .total-label {{ font-size:12px; font-weight:600; color:{c.secondary}; }}
    .total-val {{ font-size:14px; font-weight:700; color:{c.name}; }}
    """,
        f"""<div class="page">
    <div class="top">
      <div class="brand">{_logo_img(opts.logo, "48px", "120px")}<div><div class="co-name">{t("companyName")}</div><div class="co-addr">{t("companyAddress")}</div></div></div>
      <div><div class="inv-title">INVOICE</div><div class="inv-meta">{t("invoiceNumber")} &bull; {t("date")}<br>Due: {t("dueDate")}</div></div>
    </div>
    <div class="parties">
      <div><div class="party-label">Bill To</div><div class="party-name">{t("clientName")}</div><div class="party-addr">{t("clientAddress")}</div></div>
    </div>
    <table class="table">
      <thead><tr><th>Description</th></tr></thead>
      <tbody>{rows}</tbody>
    </table>
    <div class="total-row"><span class="total-label">Total</span><span class="total-val">{t("total")}</span></div>
  </div>""",
    )


@_register("invoice", "minimal")
def _invoice_minimal(opts: GenerateOptions) -> str:
    c = opts.palette
    a = opts.asset
    t = opts.text
    rows = "".join(f'<div class="item">{esc(line)}</div>' for line in split_lines(opts.fields.get("items")))
    if not rows:
        rows = f'<div class="item" style="opacity:0.4">{EMPTY_ITEMS_MESSAGE}</div>'
    return opts.wrap(
        f"""
    .page {{ width:{a.width}; height:{a.height}; background:{c.bg}; padding:40px 48px; display:flex; flex-direction:column; }}
    .header {{ display:flex; justify-content:space-between; align-items:flex-end; padding-bottom:16px; border-bottom:1px solid {c.rule}; margin-bottom:20px; }}
    .co-name {{ font-size:14px; font-weight:600; color:{c.name}; }}
    .co-addr {{ font-size:9px; color:{c.detail}; }}
    .inv-num {{ font-size:10px; color:{c.muted}; text-align:right; }}
    .inv-label {{ font-size:18px; font-weight:700; color:{c.name}; text-align:right; }}
    .meta {{ display:flex; justify-content:space-between; margin-bottom:20px; }}
    .meta-block {{ font-size:10px; color:{c.detail}; }}
    .meta-label {{ font-size:8px; color:{c.muted}; text-transform:uppercase; margin-bottom:2px; }}
    .meta-val {{ font-weight:600; color:{c.name}; }}
    .items {{ flex:1; }}
    .item {{ padding:6px 0; border-bottom:1px solid {c.rule}; font-size:10px; color:{c.detail}; }}
    .total-bar {{ margin-top:12px; padding-top:12px; border-top:2px solid {c.name}; display:flex; justify-content:flex-end; gap:20px; }}
    .total-label {{ font-size:11px; color:{c.secondary}; }}
    .total-val {{ font-size:14px; font-weight:700; color:{c.name}; }}
    """,
        f"""<div class="page">
    <div class="header">
      <div>{_logo_img(opts.logo, "40px", "100px")}<div class="co-name">{t("companyName")}</div><div class="co-addr">{t("companyAddress")}</div></div>
      <div><div class="inv-label">Invoice</div><div class="inv-num">{t("invoiceNumber")}</div></div>
    </div>
    <div class="meta">
      <div class="meta-block"><div class="meta-label">Bill To</div><div class="meta-val">{t("clientName")}</div><div>{t("clientAddress")}</div></div>
      <div class="meta-block" style="text-align:right"><div class="meta-label">Date</div><div>{t("date")}</div><div class="meta-label" style="margin-top:6px">Due</div><div>{t("dueDate")}</div></div>
    </div>
    <div class="items">{rows}</div>
    <div class="total-bar"><span class="total-label">Total</span><span class="total-val">{t("total")}</span></div>
  </div>""",
    )
