import logging
from typing import Optional

import httpx

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class RenderServiceError(RuntimeError):
    def __init__(self, detail: str, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def render_filename(asset_id: str, template_id: str, dark: bool) -> str:
    return f"{asset_id}-{template_id}{'-dark' if dark else ''}"


class RenderServiceClient:
    """
    Client for the external HTML-to-PDF rendering service.

    The service receives a fully self-contained HTML document and returns the
    paginated binary. It must not add margins or scale the content; page
    sizing comes from the document's own @page rules.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport

    async def render(self, html: str, *, filename: str) -> bytes:
        url = self.settings.render_service_url
        logger.info("Submitting %s (%d chars) to renderer %s", filename, len(html), url)
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.render_timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json={"html": html, "filename": filename})
        except httpx.HTTPError as exc:
            raise RenderServiceError(f"Render request failed: {exc}") from exc

        if not response.is_success:
            detail = response.text.strip() or "PDF failed"
            logger.error("Renderer rejected %s status=%s: %s", filename, response.status_code, detail)
            raise RenderServiceError(detail, status_code=response.status_code)

        logger.info("Rendered %s (%d bytes)", filename, len(response.content))
        return response.content
