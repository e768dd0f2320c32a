"""Tests for app.services.browser: launch modes and guaranteed release."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.config import Settings
from app.services.browser import BrowserLaunchError, BrowserSession, launch_browser, page_session


def _fake_playwright() -> MagicMock:
    pw = MagicMock()
    pw.chromium.launch = AsyncMock(return_value=MagicMock())
    pw.chromium.connect_over_cdp = AsyncMock(return_value=MagicMock())
    pw.stop = AsyncMock()
    return pw


def _patch_driver(pw: MagicMock):
    driver = MagicMock()
    driver.start = AsyncMock(return_value=pw)
    return patch("app.services.browser.async_playwright", return_value=driver)


def _fake_session(page=None) -> MagicMock:
    session = MagicMock()
    session.new_page = AsyncMock(return_value=page or MagicMock())
    session.close = AsyncMock()
    return session


class TestLaunchBrowser:
    @pytest.mark.asyncio
    async def test_launches_local_chromium(self):
        pw = _fake_playwright()
        with _patch_driver(pw):
            session = await launch_browser(Settings(headless=True))

        assert isinstance(session, BrowserSession)
        pw.chromium.launch.assert_awaited_once()
        assert pw.chromium.launch.await_args.kwargs["headless"] is True
        assert "--no-sandbox" in pw.chromium.launch.await_args.kwargs["args"]
        pw.chromium.connect_over_cdp.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connects_to_remote_endpoint(self):
        pw = _fake_playwright()
        with _patch_driver(pw):
            await launch_browser(Settings(browser_ws_endpoint="ws://browser:9222"))

        pw.chromium.connect_over_cdp.assert_awaited_once()
        assert pw.chromium.connect_over_cdp.await_args.args == ("ws://browser:9222",)
        pw.chromium.launch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_launch_failure_stops_driver(self):
        pw = _fake_playwright()
        pw.chromium.launch = AsyncMock(side_effect=RuntimeError("Executable doesn't exist"))
        with _patch_driver(pw), pytest.raises(RuntimeError):
            await launch_browser(Settings())

        pw.stop.assert_awaited_once()


class TestBrowserSession:
    @pytest.mark.asyncio
    async def test_new_page_uses_fresh_context(self):
        browser = MagicMock()
        context = MagicMock()
        context.new_page = AsyncMock(return_value="page")
        browser.new_context = AsyncMock(return_value=context)
        session = BrowserSession(_fake_playwright(), browser, Settings(user_agent="Bot/1.0"))

        assert await session.new_page() == "page"
        browser.new_context.assert_awaited_once_with(user_agent="Bot/1.0")

    @pytest.mark.asyncio
    async def test_close_stops_driver_even_if_browser_close_fails(self):
        pw = _fake_playwright()
        browser = MagicMock()
        browser.close = AsyncMock(side_effect=RuntimeError("already closed"))
        session = BrowserSession(pw, browser, Settings())

        with pytest.raises(RuntimeError):
            await session.close()

        pw.stop.assert_awaited_once()


class TestPageSession:
    @pytest.mark.asyncio
    async def test_closes_browser_after_success(self):
        page = MagicMock()
        session = _fake_session(page)
        with patch("app.services.browser.launch_browser", new=AsyncMock(return_value=session)):
            async with page_session(Settings()) as ps:
                assert ps.page is page
                session.close.assert_not_awaited()

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_closes_browser_when_body_raises(self):
        session = _fake_session()
        with patch("app.services.browser.launch_browser", new=AsyncMock(return_value=session)):
            with pytest.raises(ValueError):
                async with page_session(Settings()):
                    raise ValueError("extraction failed")

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_closes_browser_when_page_creation_fails(self):
        session = _fake_session()
        session.new_page = AsyncMock(side_effect=RuntimeError("Target closed"))
        with patch("app.services.browser.launch_browser", new=AsyncMock(return_value=session)):
            with pytest.raises(RuntimeError):
                async with page_session(Settings()):
                    pass

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_launch_failure_raises_browser_launch_error(self):
        with patch(
            "app.services.browser.launch_browser",
            new=AsyncMock(side_effect=RuntimeError("no chromium")),
        ):
            with pytest.raises(BrowserLaunchError, match="no chromium"):
                async with page_session(Settings()):
                    pass
