"""Tests for the brand store and rendering service HTTP clients."""
import json
import unittest

import httpx

from brandsync.brand_store import BrandStoreClient, BrandStoreError
from brandsync.config import Settings
from brandsync.render_client import RenderServiceClient, RenderServiceError, render_filename
from brandsync.schemas import BrandPayload, BrandState


def _settings() -> Settings:
    return Settings(
        brand_store_url="http://store.test/api/brand",
        render_service_url="http://render.test/api/render-pdf",
    )


class BrandStoreClientTest(unittest.IsolatedAsyncioTestCase):
    async def test_fetch_uses_configured_url(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, str(request.url)))
            return httpx.Response(200, json={"email": "hi@acme.test"})

        brand = await BrandStoreClient(_settings(), transport=httpx.MockTransport(handler)).fetch()
        self.assertEqual(seen, [("GET", "http://store.test/api/brand")])
        self.assertEqual(brand.email, "hi@acme.test")
        self.assertEqual(brand.name, "BrandSync")
        self.assertIsNone(brand.logo)

    async def test_null_body_means_defaults(self) -> None:
        client = BrandStoreClient(_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"null")))
        self.assertEqual(await client.fetch(), BrandState.defaults())

    async def test_non_object_payload_is_an_error(self) -> None:
        client = BrandStoreClient(_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[1, 2])))
        with self.assertRaises(BrandStoreError):
            await client.fetch()

    async def test_invalid_json_is_an_error(self) -> None:
        client = BrandStoreClient(_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>")))
        with self.assertRaises(BrandStoreError):
            await client.fetch()

    async def test_network_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("store down", request=request)

        client = BrandStoreClient(_settings(), transport=httpx.MockTransport(handler))
        with self.assertRaises(BrandStoreError):
            await client.fetch()
        with self.assertRaises(BrandStoreError):
            await client.save(BrandState.defaults())

    async def test_save_puts_json(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, json.loads(request.content)))
            return httpx.Response(200)

        brand = BrandState(name="Acme", tagline="t", email="e", phone="p", logo="data:x")
        await BrandStoreClient(_settings(), transport=httpx.MockTransport(handler)).save(brand)
        self.assertEqual(
            seen,
            [("PUT", {"name": "Acme", "tagline": "t", "email": "e", "phone": "p", "logo_url": "data:x"})],
        )


class RenderServiceClientTest(unittest.IsolatedAsyncioTestCase):
    async def test_returns_binary_body(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((str(request.url), json.loads(request.content)))
            return httpx.Response(200, content=b"%PDF", headers={"Content-Type": "application/pdf"})

        client = RenderServiceClient(_settings(), transport=httpx.MockTransport(handler))
        content = await client.render("<!DOCTYPE html><html></html>", filename="invoice-clean")
        self.assertEqual(content, b"%PDF")
        self.assertEqual(
            seen,
            [("http://render.test/api/render-pdf", {"html": "<!DOCTYPE html><html></html>", "filename": "invoice-clean"})],
        )

    async def test_error_detail_is_response_body(self) -> None:
        client = RenderServiceClient(
            _settings(),
            transport=httpx.MockTransport(lambda r: httpx.Response(422, text="bad html")),
        )
        with self.assertRaises(RenderServiceError) as ctx:
            await client.render("<html></html>", filename="x")
        self.assertEqual(ctx.exception.detail, "bad html")
        self.assertEqual(ctx.exception.status_code, 422)

    async def test_empty_error_body_gets_generic_detail(self) -> None:
        client = RenderServiceClient(_settings(), transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        with self.assertRaises(RenderServiceError) as ctx:
            await client.render("<html></html>", filename="x")
        self.assertEqual(ctx.exception.detail, "PDF failed")

    async def test_network_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("renderer down", request=request)

        client = RenderServiceClient(_settings(), transport=httpx.MockTransport(handler))
        with self.assertRaises(RenderServiceError) as ctx:
            await client.render("<html></html>", filename="x")
        self.assertIsNone(ctx.exception.status_code)


class WireShapeTest(unittest.TestCase):
    def test_absent_keys_default_independently(self) -> None:
        state = BrandPayload.model_validate({"tagline": "", "phone": "1"}).to_state()
        self.assertEqual(state.tagline, "")
        self.assertEqual(state.phone, "1")
        self.assertEqual(state.name, "BrandSync")

    def test_render_filename(self) -> None:
        self.assertEqual(render_filename("envelope", "classic", False), "envelope-classic")
        self.assertEqual(render_filename("envelope", "classic", True), "envelope-classic-dark")


if __name__ == "__main__":
    unittest.main()
