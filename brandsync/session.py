from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from .asset_html import generate_asset_html
from .brand_store import BrandStoreClient, BrandStoreError
from .formatting import format_field
from .preview import (
    DEFAULT_BUDGET_HEIGHT,
    DEFAULT_BUDGET_WIDTH,
    PreviewFrame,
    display_size,
    fit_zoom,
    zoom_in,
    zoom_out,
)
from .render_client import RenderServiceClient, RenderServiceError, render_filename
from .schemas import AssetTemplate, AssetTypeConfig, BrandPatch, BrandState

logger = logging.getLogger(__name__)

# Field keys that start from the saved brand when an editor opens.
BRAND_SEED_KEYS: Dict[str, str] = {
    "email": "email",
    "phone": "phone",
    "tagline": "tagline",
    "companyName": "name",
    "fromName": "name",
}


class GenerationInProgress(RuntimeError):
    pass


class MissingRequiredFields(ValueError):
    def __init__(self, keys: List[str]) -> None:
        super().__init__(f"Required fields are blank: {', '.join(keys)}")
        self.keys = keys


def seed_fields(asset: AssetTypeConfig, brand: BrandState) -> Dict[str, str]:
    seeded: Dict[str, str] = {}
    for f in asset.fields:
        attr = BRAND_SEED_KEYS.get(f.key)
        seeded[f.key] = str(getattr(brand, attr) or "") if attr else ""
    return seeded


@dataclass
class EditorSession:
    """
    State of one open asset editor.

    Field values live only as long as the session; nothing here is persisted.
    """

    asset: AssetTypeConfig
    template: AssetTemplate
    logo: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)
    dark: bool = True
    zoom: float = 1.0
    generating: bool = False
    last_error: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))

    @classmethod
    def open(
        cls,
        asset: AssetTypeConfig,
        template: AssetTemplate,
        brand: BrandState,
        *,
        budget_width: float = DEFAULT_BUDGET_WIDTH,
        budget_height: float = DEFAULT_BUDGET_HEIGHT,
    ) -> "EditorSession":
        session = cls(
            asset=asset,
            template=template,
            logo=brand.logo,
            fields=seed_fields(asset, brand),
            dark=True,
            zoom=fit_zoom(asset.preview_width, asset.preview_height, budget_width, budget_height),
        )
        logger.info(
            "Editor opened id=%s asset=%s template=%s zoom=%s",
            session.id,
            asset.id,
            template.id,
            session.zoom,
        )
        return session

    def update_field(self, key: str, value: str) -> str:
        asset_field = next((f for f in self.asset.fields if f.key == key), None)
        if asset_field is None:
            raise KeyError(key)
        formatted = format_field(value, asset_field.type)
        self.fields[key] = formatted
        return formatted

    def missing_required(self) -> List[str]:
        return [key for key in self.asset.required_keys() if not (self.fields.get(key) or "").strip()]

    def toggle_dark(self) -> bool:
        self.dark = not self.dark
        return self.dark

    def zoom_in(self) -> float:
        self.zoom = zoom_in(self.zoom)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = zoom_out(self.zoom)
        return self.zoom

    @property
    def frame(self) -> PreviewFrame:
        return display_size(self.asset.preview_width, self.asset.preview_height, self.zoom)

    @property
    def filename(self) -> str:
        return render_filename(self.asset.id, self.template.id, self.dark)

    def render_html(self) -> str:
        return generate_asset_html(self.asset, self.template.id, self.fields, self.logo, self.dark)

    async def generate_pdf(self, renderer: RenderServiceClient) -> bytes:
        """
        Submit the current document to the rendering service.

        Only one request may be outstanding per session. Field values are left
        untouched on failure so the user can retry.
        """
        if self.generating:
            raise GenerationInProgress(f"Session {self.id} is already generating")
        missing = self.missing_required()
        if missing:
            raise MissingRequiredFields(missing)

        self.generating = True
        self.last_error = None
        try:
            return await renderer.render(self.render_html(), filename=self.filename)
        except RenderServiceError as exc:
            logger.error("PDF generation failed for session %s: %s", self.id, exc.detail)
            self.last_error = exc.detail
            raise
        finally:
            self.generating = False


class SessionRegistry:
    """
    Open editor sessions, keyed by id.

    Sessions idle for longer than `idle_seconds` are dropped on the next
    access. When `max_sessions` is reached the least recently used one goes.
    """

    def __init__(
        self,
        max_sessions: int = 50,
        idle_seconds: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_sessions = max_sessions
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: "OrderedDict[str, EditorSession]" = OrderedDict()
        self._last_used: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def add(self, session: EditorSession) -> None:
        self.prune()
        while self._sessions and len(self._sessions) >= self.max_sessions:
            oldest_id = next(iter(self._sessions))
            self.pop(oldest_id)
            logger.info("Editor evicted id=%s (limit %d)", oldest_id, self.max_sessions)
        self._sessions[session.id] = session
        self._last_used[session.id] = self._clock()

    def get(self, session_id: str) -> Optional[EditorSession]:
        self.prune()
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            self._last_used[session_id] = self._clock()
        return session

    def pop(self, session_id: str) -> Optional[EditorSession]:
        self._last_used.pop(session_id, None)
        return self._sessions.pop(session_id, None)

    def prune(self) -> List[str]:
        cutoff = self._clock() - self.idle_seconds
        stale = [
            session_id
            for session_id, used in self._last_used.items()
            if used < cutoff and not self._sessions[session_id].generating
        ]
        for session_id in stale:
            self.pop(session_id)
            logger.info("Editor expired id=%s", session_id)
        return stale

    def clear(self) -> None:
        self._sessions.clear()
        self._last_used.clear()


class BrandWorkspace:
    """
    The user's brand profile plus its load/save bookkeeping.

    Saves are serialized: a second save waits for the first to finish.
    Loads are serialized too, so concurrent first requests fetch only once.
    """

    def __init__(self, store: BrandStoreClient) -> None:
        self.store = store
        self.brand = BrandState.defaults()
        self.loaded = False
        self.dirty = False
        self.saving = False
        self.last_error: Optional[str] = None
        self._load_lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()

    async def _fetch(self) -> BrandState:
        try:
            self.brand = await self.store.fetch()
        except BrandStoreError as exc:
            logger.warning("Brand load failed, using defaults: %s", exc)
            self.brand = BrandState.defaults()
        finally:
            self.loaded = True
        self.dirty = False
        return self.brand

    async def load(self) -> BrandState:
        """Fetch the stored brand, replacing whatever is held in memory."""
        async with self._load_lock:
            return await self._fetch()

    async def ensure_loaded(self) -> BrandState:
        """Fetch the stored brand once; callers racing the first fetch wait for it."""
        if self.loaded:
            return self.brand
        async with self._load_lock:
            if not self.loaded:
                await self._fetch()
        return self.brand

    def update(self, patch: BrandPatch) -> BrandState:
        changes = patch.model_dump(exclude_none=True, exclude={"clear_logo"})
        if patch.clear_logo:
            changes["logo"] = None
        self.brand = self.brand.model_copy(update=changes)
        if self.loaded:
            self.dirty = True
        return self.brand

    def reset(self) -> BrandState:
        self.brand = BrandState.defaults()
        self.dirty = True
        return self.brand

    async def save(self) -> BrandState:
        async with self._save_lock:
            snapshot = self.brand.model_copy()
            self.saving = True
            try:
                await self.store.save(snapshot)
            except BrandStoreError as exc:
                self.last_error = str(exc)
                raise
            finally:
                self.saving = False
            self.last_error = None
            if self.brand == snapshot:
                self.dirty = False
            return snapshot
