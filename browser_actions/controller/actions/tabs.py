"""Tab management actions."""

from __future__ import annotations

import logging

from ...config_schema import ControllerConfig
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())


async def switch_tab(page_id: int, browser: BrowserDriver) -> ActionResult:
    try:
        await browser.switch_tab(page_id)
        await browser.wait_for_load()
    except Exception as e:
        return ActionResult.failure(f"Failed to switch to tab {page_id}: {e}")
    msg = f"Switched to tab {page_id}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def open_tab(url: str, browser: BrowserDriver) -> ActionResult:
    try:
        await browser.new_tab(url)
    except Exception as e:
        return ActionResult.failure(f"Failed to open new tab with {url}: {e}")
    msg = f"Opened new tab with {url}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def close_tab(page_id: int, browser: BrowserDriver) -> ActionResult:
    try:
        await browser.close_tab(page_id)
    except Exception as e:
        return ActionResult.failure(f"Failed to close tab {page_id}: {e}")
    msg = f"Closed tab {page_id}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


def register(registry: Registry, config: ControllerConfig) -> None:
    registry.register("switch_tab", "Switch tab", switch_tab, params.SWITCH_TAB)
    registry.register("open_tab", "Open url in new tab", open_tab, params.OPEN_TAB)
    registry.register("close_tab", "Close an existing tab", close_tab, params.CLOSE_TAB)
