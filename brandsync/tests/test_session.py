"""Tests for editor sessions and the brand workspace."""
import asyncio
import json
import unittest

import httpx

from brandsync.brand_store import BrandStoreClient, BrandStoreError
from brandsync.catalog import get_asset_type, get_template
from brandsync.config import Settings
from brandsync.render_client import RenderServiceClient, RenderServiceError
from brandsync.schemas import BrandPatch, BrandState
from brandsync.session import (
    BrandWorkspace,
    EditorSession,
    GenerationInProgress,
    MissingRequiredFields,
    SessionRegistry,
    seed_fields,
)


def _open(asset_id: str, template_id: str, brand: BrandState = None) -> EditorSession:
    asset = get_asset_type(asset_id)
    return EditorSession.open(asset, get_template(asset, template_id), brand or BrandState.defaults())


class SeedFieldsTest(unittest.TestCase):
    def test_business_card_seeds_contact_fields_only(self) -> None:
        brand = BrandState.defaults()
        seeded = seed_fields(get_asset_type("business-card"), brand)
        self.assertEqual(
            seeded,
            {
                "name": "",
                "title": "",
                "email": "contact@brandsync.com",
                "phone": "+1 (555) 123-4567",
                "tagline": "Your brand, unified",
            },
        )

    def test_company_and_sender_names_come_from_brand(self) -> None:
        brand = BrandState(name="Acme", tagline="", email="", phone="")
        self.assertEqual(seed_fields(get_asset_type("letterhead"), brand)["companyName"], "Acme")
        self.assertEqual(seed_fields(get_asset_type("envelope"), brand)["fromName"], "Acme")
        self.assertEqual(seed_fields(get_asset_type("envelope"), brand)["toName"], "")


class EditorSessionTest(unittest.TestCase):
    def test_open_defaults(self) -> None:
        session = _open("letterhead", "simple")
        self.assertTrue(session.dark)
        self.assertEqual(session.zoom, 0.5)
        self.assertEqual(session.frame.display_width, 408.0)
        self.assertEqual(session.filename, "letterhead-simple-dark")

    def test_update_field_applies_formatter(self) -> None:
        session = _open("invoice", "clean")
        self.assertEqual(session.update_field("total", "1234.5"), "$1,234.50")
        self.assertEqual(session.update_field("items", "a\nb"), "a\nb")
        self.assertEqual(session.fields["total"], "$1,234.50")

    def test_unknown_field_raises(self) -> None:
        session = _open("invoice", "clean")
        with self.assertRaises(KeyError):
            session.update_field("color", "red")

    def test_missing_required(self) -> None:
        session = _open("invoice", "minimal")
        self.assertEqual(session.missing_required(), ["clientName", "total"])
        session.update_field("clientName", "   ")
        self.assertEqual(session.missing_required(), ["clientName", "total"])
        session.update_field("clientName", "Globex")
        session.update_field("total", "10")
        self.assertEqual(session.missing_required(), [])

    def test_render_reflects_mode_and_fields(self) -> None:
        session = _open("business-card", "modern")
        session.update_field("name", "Jo & Co")
        self.assertIn("Jo &amp; Co", session.render_html())
        self.assertIn("#09090b", session.render_html())
        session.toggle_dark()
        self.assertNotIn("#09090b", session.render_html())
        self.assertEqual(session.filename, "business-card-modern")

    def test_zoom_controls(self) -> None:
        session = _open("business-card", "bold")
        self.assertEqual(session.zoom, 1.0)
        self.assertEqual(session.zoom_in(), 1.25)
        self.assertEqual(session.zoom_out(), 1.0)


class SessionRegistryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.now = 0.0
        self.registry = SessionRegistry(max_sessions=2, idle_seconds=60.0, clock=lambda: self.now)

    def test_idle_sessions_expire(self) -> None:
        session = _open("invoice", "clean")
        self.registry.add(session)
        self.now = 59.0
        self.assertIs(self.registry.get(session.id), session)
        self.now = 130.0
        self.assertIsNone(self.registry.get(session.id))
        self.assertEqual(len(self.registry), 0)

    def test_generating_session_is_not_expired(self) -> None:
        session = _open("invoice", "clean")
        self.registry.add(session)
        session.generating = True
        self.now = 1000.0
        self.assertIs(self.registry.get(session.id), session)

    def test_cap_evicts_least_recently_used(self) -> None:
        first = _open("envelope", "classic")
        second = _open("envelope", "modern")
        third = _open("letterhead", "simple")
        self.registry.add(first)
        self.registry.add(second)
        self.registry.get(first.id)
        self.registry.add(third)
        self.assertIn(first.id, self.registry)
        self.assertNotIn(second.id, self.registry)
        self.assertIn(third.id, self.registry)

    def test_pop_and_clear(self) -> None:
        session = _open("invoice", "minimal")
        self.registry.add(session)
        self.assertIs(self.registry.pop(session.id), session)
        self.assertIsNone(self.registry.pop(session.id))
        self.registry.add(session)
        self.registry.clear()
        self.assertEqual(len(self.registry), 0)


class GeneratePdfTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.requests = []
        self.reply = httpx.Response(200, content=b"%PDF-1.7 fake")

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(json.loads(request.content))
            return self.reply

        self.renderer = RenderServiceClient(Settings(), transport=httpx.MockTransport(handler))
        self.session = _open("business-card", "modern")
        self.session.update_field("name", "Jo")

    async def test_submits_html_and_filename(self) -> None:
        content = await self.session.generate_pdf(self.renderer)
        self.assertEqual(content, b"%PDF-1.7 fake")
        self.assertEqual(len(self.requests), 1)
        self.assertEqual(self.requests[0]["filename"], "business-card-modern-dark")
        self.assertEqual(self.requests[0]["html"], self.session.render_html())
        self.assertFalse(self.session.generating)

    async def test_missing_required_blocks_request(self) -> None:
        self.session.update_field("name", "")
        with self.assertRaises(MissingRequiredFields) as ctx:
            await self.session.generate_pdf(self.renderer)
        self.assertEqual(ctx.exception.keys, ["name"])
        self.assertEqual(self.requests, [])

    async def test_failure_keeps_fields_and_records_error(self) -> None:
        self.reply = httpx.Response(500, text="renderer exploded")
        before = dict(self.session.fields)
        with self.assertRaises(RenderServiceError):
            await self.session.generate_pdf(self.renderer)
        self.assertEqual(self.session.fields, before)
        self.assertEqual(self.session.last_error, "renderer exploded")
        self.assertFalse(self.session.generating)

    async def test_second_request_while_generating_is_refused(self) -> None:
        self.session.generating = True
        with self.assertRaises(GenerationInProgress):
            await self.session.generate_pdf(self.renderer)
        self.assertEqual(self.requests, [])


class BrandWorkspaceTest(unittest.IsolatedAsyncioTestCase):
    def _workspace(self, handler) -> BrandWorkspace:
        return BrandWorkspace(BrandStoreClient(Settings(), transport=httpx.MockTransport(handler)))

    async def test_load_merges_with_defaults(self) -> None:
        workspace = self._workspace(lambda request: httpx.Response(200, json={"name": "Acme", "logo_url": "data:x"}))
        brand = await workspace.load()
        self.assertEqual(brand.name, "Acme")
        self.assertEqual(brand.tagline, "Your brand, unified")
        self.assertEqual(brand.logo, "data:x")
        self.assertTrue(workspace.loaded)
        self.assertFalse(workspace.dirty)

    async def test_load_failure_falls_back_to_defaults(self) -> None:
        workspace = self._workspace(lambda request: httpx.Response(503))
        brand = await workspace.load()
        self.assertEqual(brand, BrandState.defaults())
        self.assertTrue(workspace.loaded)
        self.assertIsNone(workspace.last_error)

    async def test_concurrent_first_loads_fetch_once(self) -> None:
        calls = []

        async def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.method)
            await asyncio.sleep(0.05)
            return httpx.Response(200, json={"name": "Stored"})

        workspace = self._workspace(handler)

        async def edit_after_load() -> None:
            await workspace.ensure_loaded()
            workspace.update(BrandPatch(name="Edited"))

        await asyncio.gather(workspace.ensure_loaded(), edit_after_load())
        self.assertEqual(calls, ["GET"])
        self.assertEqual(workspace.brand.name, "Edited")
        self.assertTrue(workspace.dirty)

        await workspace.ensure_loaded()
        self.assertEqual(calls, ["GET"])
        self.assertEqual(workspace.brand.name, "Edited")

    async def test_updates_before_load_are_not_dirty(self) -> None:
        workspace = self._workspace(lambda request: httpx.Response(200, json={}))
        workspace.update(BrandPatch(name="Early"))
        self.assertFalse(workspace.dirty)
        await workspace.load()
        workspace.update(BrandPatch(tagline="Later"))
        self.assertTrue(workspace.dirty)
        self.assertEqual(workspace.brand.tagline, "Later")

    async def test_clear_logo(self) -> None:
        workspace = self._workspace(lambda request: httpx.Response(200, json={"logo_url": "data:x"}))
        await workspace.load()
        workspace.update(BrandPatch(clear_logo=True))
        self.assertIsNone(workspace.brand.logo)

    async def test_save_sends_wire_shape_and_clears_dirty(self) -> None:
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "PUT":
                bodies.append(json.loads(request.content))
                return httpx.Response(204)
            return httpx.Response(200, json={})

        workspace = self._workspace(handler)
        await workspace.load()
        workspace.update(BrandPatch(name="Acme"))
        await workspace.save()
        self.assertFalse(workspace.dirty)
        self.assertEqual(
            bodies,
            [
                {
                    "name": "Acme",
                    "tagline": "Your brand, unified",
                    "email": "contact@brandsync.com",
                    "phone": "+1 (555) 123-4567",
                    "logo_url": None,
                }
            ],
        )

    async def test_save_failure_is_recoverable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "PUT":
                return httpx.Response(500)
            return httpx.Response(200, json={})

        workspace = self._workspace(handler)
        await workspace.load()
        workspace.update(BrandPatch(name="Acme"))
        with self.assertRaises(BrandStoreError):
            await workspace.save()
        self.assertTrue(workspace.dirty)
        self.assertFalse(workspace.saving)
        self.assertIsNotNone(workspace.last_error)
        self.assertEqual(workspace.brand.name, "Acme")

    async def test_saves_are_serialized(self) -> None:
        active = 0
        peak = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return httpx.Response(204)

        workspace = self._workspace(handler)
        workspace.loaded = True
        await asyncio.gather(workspace.save(), workspace.save(), workspace.save())
        self.assertEqual(peak, 1)

    async def test_reset_marks_dirty(self) -> None:
        workspace = self._workspace(lambda request: httpx.Response(200, json={"name": "Acme"}))
        await workspace.load()
        workspace.reset()
        self.assertEqual(workspace.brand, BrandState.defaults())
        self.assertTrue(workspace.dirty)


if __name__ == "__main__":
    unittest.main()
