"""Navigation and timing actions."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from urllib.parse import quote_plus

from ...config_schema import ControllerConfig
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())


async def search_google(query: str, browser: BrowserDriver, *, search_url: str) -> ActionResult:
    try:
        await browser.navigate(search_url.format(query=quote_plus(query)))
        await browser.wait_for_load()
    except Exception as e:
        logger.info("Search for %r failed: %s", query, e)
        return ActionResult.failure(f"Search failed: {e}")
    msg = f'Searched for "{query}" in Google'
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def go_to_url(url: str, browser: BrowserDriver) -> ActionResult:
    try:
        await browser.navigate(url)
        await browser.wait_for_load()
    except Exception as e:
        logger.info("Navigation to %s failed: %s", url, e)
        return ActionResult.failure(f"Navigation to {url} failed: {e}")
    msg = f"Navigated to {url}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def go_back(browser: BrowserDriver) -> ActionResult:
    try:
        await browser.go_back()
    except Exception as e:
        return ActionResult.failure(f"Navigating back failed: {e}")
    msg = "Navigated back"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def wait(seconds: int) -> ActionResult:
    msg = f"Waiting for {seconds} seconds"
    logger.info(msg)
    await asyncio.sleep(max(seconds, 0))
    return ActionResult(extracted_content=msg, include_in_memory=True)


def register(registry: Registry, config: ControllerConfig) -> None:
    registry.register(
        "search_google",
        "Search the query in Google in the current tab, the query should be a search query "
        "like humans search in Google, concrete and not vague or super long. "
        "More the single most important items.",
        partial(search_google, search_url=config.search_url),
        params.SEARCH_GOOGLE,
    )
    registry.register("go_to_url", "Navigate to URL in the current tab", go_to_url, params.GO_TO_URL)
    registry.register("go_back", "Go back", go_back, params.GO_BACK)
    registry.register(
        "wait",
        f"Wait for x seconds default {config.wait_default_seconds}",
        wait,
        params.wait_params(config.wait_default_seconds),
    )
