"""Tests for testing utilities (FakeBrowser, RecordingTelemetry).

These tests verify the fake driver behaves like a browser closely enough
for the action tests to rely on it.
"""

from __future__ import annotations

import pytest

from browser_actions.controller import BrowserDriver
from tests.testing_utils import FakeBrowser, RecordingTelemetry, element


class TestFakeBrowser:
    """FakeBrowser state machine."""

    def test_satisfies_driver_protocol(self) -> None:
        assert isinstance(FakeBrowser(), BrowserDriver)

    def test_element_helper_builds_xpath(self) -> None:
        el = element(3, "select", name="color")
        assert el.xpath == "html/body/select[3]"
        assert el.attributes == {"name": "color"}

    @pytest.mark.asyncio
    async def test_navigation_history(self) -> None:
        browser = FakeBrowser("https://a.io/")
        await browser.navigate("https://b.io/")
        await browser.go_back()
        assert browser.url == "https://a.io/"
        assert browser.navigate.await_count == 1

    @pytest.mark.asyncio
    async def test_tabs(self) -> None:
        browser = FakeBrowser("https://a.io/")
        await browser.new_tab("https://b.io/")
        assert await browser.tab_count() == 2
        await browser.switch_tab(0)
        assert (await browser.current_page()).tab_id == 0
        with pytest.raises(IndexError):
            await browser.switch_tab(5)

    @pytest.mark.asyncio
    async def test_scripted_frames(self) -> None:
        browser = FakeBrowser(frame_scripts=[{"check": 1}, {"check": ValueError("detached")}])
        assert await browser.frame_count() == 2
        assert await browser.evaluate("check", frame=0) == 1
        with pytest.raises(ValueError):
            await browser.evaluate("check", frame=1)

    @pytest.mark.asyncio
    async def test_side_effect_override(self) -> None:
        browser = FakeBrowser()
        browser.press.side_effect = RuntimeError("keyboard gone")
        with pytest.raises(RuntimeError):
            await browser.press("Enter")
        assert browser.keys == []


class TestRecordingTelemetry:
    """RecordingTelemetry filtering."""

    def test_of_type(self) -> None:
        sink = RecordingTelemetry()
        sink.capture("not an event")  # type: ignore[arg-type]
        assert sink.of_type(int) == []
        assert sink.events == ["not an event"]
