import logging
from pathlib import Path
from typing import Dict, List

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from .asset_html import generate_asset_html
from .brand_store import BrandStoreClient, BrandStoreError
from .catalog import get_asset_type, get_template, list_asset_types
from .config import get_settings
from .formatting import format_field
from .preview import PreviewFrame, thumbnail_frame
from .render_client import RenderServiceClient, RenderServiceError
from .schemas import (
    AssetTypeConfig,
    BrandPatch,
    EditorOpenRequest,
    EditorState,
    FieldUpdate,
    FormatRequest,
    FormatResponse,
    GenerateRequest,
    WorkspaceState,
)
from .session import (
    BrandWorkspace,
    EditorSession,
    GenerationInProgress,
    MissingRequiredFields,
    SessionRegistry,
    seed_fields,
)

_settings = get_settings()

logging.basicConfig(
    level=getattr(logging, _settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("brandsync")

app = FastAPI(title="BrandSync", version="0.1.0")

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

brand_store = BrandStoreClient(_settings)
renderer = RenderServiceClient(_settings)
workspace = BrandWorkspace(brand_store)

# Open editor sessions (not persisted).
EDITOR_SESSIONS = SessionRegistry(
    max_sessions=_settings.max_editor_sessions,
    idle_seconds=_settings.editor_idle_seconds,
)


async def _ensure_brand_loaded() -> None:
    await workspace.ensure_loaded()


def _require_asset(asset_id: str) -> AssetTypeConfig:
    asset = get_asset_type(asset_id)
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown asset type: {asset_id}")
    return asset


def _require_session(session_id: str) -> EditorSession:
    session = EDITOR_SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Editor session not found")
    return session


def _workspace_state() -> WorkspaceState:
    return WorkspaceState(
        brand=workspace.brand,
        dirty=workspace.dirty,
        saving=workspace.saving,
        loaded=workspace.loaded,
        last_error=workspace.last_error,
    )


def _editor_state(session: EditorSession) -> EditorState:
    frame = session.frame
    return EditorState(
        id=session.id,
        asset_id=session.asset.id,
        template_id=session.template.id,
        fields=dict(session.fields),
        zoom=session.zoom,
        zoom_label=frame.label,
        dark=session.dark,
        display_width=frame.display_width,
        display_height=frame.display_height,
        native_width=frame.native_width,
        native_height=frame.native_height,
        frame_min_width=frame.frame_min_width,
        frame_min_height=frame.frame_min_height,
        transform=frame.transform,
        missing_required=session.missing_required(),
        generating=session.generating,
        filename=session.filename,
        last_error=session.last_error,
    )


def _thumbnail_frames() -> Dict[str, PreviewFrame]:
    return {
        asset.id: thumbnail_frame(asset.preview_width, asset.preview_height)
        for asset in list_asset_types()
    }


@app.get("/", response_class=HTMLResponse)
async def dashboard(request: Request) -> HTMLResponse:
    await _ensure_brand_loaded()
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "workspace": _workspace_state(),
            "asset_types": list_asset_types(),
            "thumbnails": _thumbnail_frames(),
        },
    )


@app.get("/api/assets", response_model=List[AssetTypeConfig])
async def api_list_assets() -> List[AssetTypeConfig]:
    return list_asset_types()


@app.get("/api/assets/{asset_id}/{template_id}/preview", response_class=HTMLResponse)
async def api_template_preview(asset_id: str, template_id: str, dark: bool = False) -> HTMLResponse:
    """
    Preview a template filled from the current brand.

    Unknown templates on a known asset still return a document (the fallback page).
    """
    asset = _require_asset(asset_id)
    await _ensure_brand_loaded()
    brand = workspace.brand
    html = generate_asset_html(asset, template_id, seed_fields(asset, brand), brand.logo, dark)
    return HTMLResponse(content=html)


@app.post("/api/generate", response_class=HTMLResponse)
async def api_generate(payload: GenerateRequest) -> HTMLResponse:
    asset = _require_asset(payload.asset_id)
    html = generate_asset_html(asset, payload.template_id, payload.fields, payload.logo, payload.dark)
    return HTMLResponse(content=html)


@app.post("/api/format", response_model=FormatResponse)
async def api_format(payload: FormatRequest) -> FormatResponse:
    return FormatResponse(value=format_field(payload.value, payload.type))


@app.get("/api/brand", response_model=WorkspaceState)
async def api_get_brand() -> WorkspaceState:
    await _ensure_brand_loaded()
    return _workspace_state()


@app.put("/api/brand", response_model=WorkspaceState)
async def api_update_brand(patch: BrandPatch) -> WorkspaceState:
    await _ensure_brand_loaded()
    workspace.update(patch)
    return _workspace_state()


@app.post("/api/brand/reset", response_model=WorkspaceState)
async def api_reset_brand() -> WorkspaceState:
    await _ensure_brand_loaded()
    workspace.reset()
    return _workspace_state()


@app.post("/api/brand/save", response_model=WorkspaceState)
async def api_save_brand() -> WorkspaceState:
    try:
        await workspace.save()
    except BrandStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to save brand: {exc}",
        ) from exc
    return _workspace_state()


@app.post("/api/editor", response_model=EditorState)
async def api_open_editor(payload: EditorOpenRequest) -> EditorState:
    asset = _require_asset(payload.asset_id)
    template = get_template(asset, payload.template_id)
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown template {payload.template_id} for {asset.id}",
        )
    await _ensure_brand_loaded()
    session = EditorSession.open(
        asset,
        template,
        workspace.brand,
        budget_width=_settings.preview_budget_width,
        budget_height=_settings.preview_budget_height,
    )
    EDITOR_SESSIONS.add(session)
    return _editor_state(session)


@app.get("/api/editor/{session_id}", response_model=EditorState)
async def api_get_editor(session_id: str) -> EditorState:
    return _editor_state(_require_session(session_id))


@app.put("/api/editor/{session_id}/fields/{key}", response_model=EditorState)
async def api_update_field(session_id: str, key: str, payload: FieldUpdate) -> EditorState:
    session = _require_session(session_id)
    try:
        session.update_field(key, payload.value)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown field {key} for {session.asset.id}",
        ) from exc
    return _editor_state(session)


@app.post("/api/editor/{session_id}/zoom/{direction}", response_model=EditorState)
async def api_zoom(session_id: str, direction: str) -> EditorState:
    session = _require_session(session_id)
    if direction == "in":
        session.zoom_in()
    elif direction == "out":
        session.zoom_out()
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Direction must be 'in' or 'out'")
    return _editor_state(session)


@app.post("/api/editor/{session_id}/dark", response_model=EditorState)
async def api_toggle_dark(session_id: str) -> EditorState:
    session = _require_session(session_id)
    session.toggle_dark()
    return _editor_state(session)


@app.get("/api/editor/{session_id}/preview", response_class=HTMLResponse)
async def api_editor_preview(session_id: str) -> HTMLResponse:
    return HTMLResponse(content=_require_session(session_id).render_html())


@app.post("/api/editor/{session_id}/pdf")
async def api_editor_pdf(session_id: str) -> Response:
    session = _require_session(session_id)
    try:
        content = await session.generate_pdf(renderer)
    except MissingRequiredFields as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc), "missing": exc.keys},
        ) from exc
    except GenerationInProgress as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RenderServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"PDF generation failed: {exc.detail}",
        ) from exc

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{session.filename}.pdf"'},
    )


@app.delete("/api/editor/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def api_close_editor(session_id: str) -> Response:
    session = EDITOR_SESSIONS.pop(session_id)
    if session is not None:
        logger.info("Editor closed id=%s asset=%s", session.id, session.asset.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/health")
async def health() -> dict:
    outcome = {
        "status": "ok",
        "brand_loaded": workspace.loaded,
        "open_sessions": len(EDITOR_SESSIONS),
    }
    logger.info("Health check result: %s", outcome)
    return outcome
