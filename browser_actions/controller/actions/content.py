"""Page content actions: extraction, scrolling, keyboard and PDF export."""

from __future__ import annotations

import logging
import re
from functools import partial
from pathlib import Path

from ...config_schema import ControllerConfig
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver, ExtractionModel


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())

EXTRACTION_PROMPT = (
    "Your task is to extract the content of the page. You will be given a page and a goal "
    "and you should extract all relevant information around this goal from the page. "
    "If the goal is vague, summarize the page. Respond in json format. "
    "Extraction goal: {goal}, Page: {page}"
)


def pdf_filename(url: str) -> str:
    """Slug of the URL without scheme, www. and trailing slash, e.g. example-com-docs.pdf."""
    short_url = re.sub(r"^https?://(?:www\.)?|/$", "", url)
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", short_url).strip("-").lower()
    return f"{slug or 'page'}.pdf"


async def extract_content(
    goal: str,
    browser: BrowserDriver,
    page_extraction_llm: ExtractionModel,
) -> ActionResult:
    try:
        content = await browser.page_content()
        output = await page_extraction_llm.summarize(
            EXTRACTION_PROMPT.format(goal=goal, page=content)
        )
    except Exception as e:
        logger.info("Extraction for goal %r failed: %s", goal, e)
        return ActionResult.failure(f"Failed to extract content: {e}")
    msg = f"Extracted from page\n: {output}\n"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def scroll_down(amount: int | None, browser: BrowserDriver) -> ActionResult:
    return await _scroll(browser, amount, up=False)


async def scroll_up(amount: int | None, browser: BrowserDriver) -> ActionResult:
    return await _scroll(browser, amount, up=True)


async def _scroll(browser: BrowserDriver, amount: int | None, *, up: bool) -> ActionResult:
    direction = "up" if up else "down"
    try:
        await browser.scroll(amount, up=up)
    except Exception as e:
        return ActionResult.failure(f"Failed to scroll {direction}: {e}")
    distance = f"{amount} pixels" if amount is not None else "one page"
    msg = f"Scrolled {direction} the page by {distance}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def send_keys(keys: str, browser: BrowserDriver) -> ActionResult:
    try:
        await browser.press(keys)
    except Exception as e:
        return ActionResult.failure(f"Failed to send keys {keys}: {e}")
    msg = f"Sent keys: {keys}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def scroll_to_text(text: str, browser: BrowserDriver) -> ActionResult:
    try:
        found = await browser.scroll_to_text(text)
    except Exception as e:
        return ActionResult.failure(f"Failed to scroll to text {text!r}: {e}")
    if found:
        msg = f"Scrolled to text: {text}"
    else:
        msg = f"Text '{text}' not found or not visible on page"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def save_pdf(browser: BrowserDriver, *, pdf_dir: str) -> ActionResult:
    try:
        page = await browser.current_page()
        path = Path(pdf_dir) / pdf_filename(page.url)
        await browser.export_pdf(str(path))
    except Exception as e:
        return ActionResult.failure(f"Failed to save PDF: {e}")
    msg = f"Saving page with URL {page.url} as PDF to {path}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


def register(registry: Registry, config: ControllerConfig) -> None:
    registry.register(
        "extract_content",
        "Extract page content to retrieve specific information from the page, "
        "e.g. all company names, a specific description, all information about, "
        "links with companies in structured format or simply links",
        extract_content,
        params.EXTRACT_CONTENT,
    )
    registry.register(
        "scroll_down",
        "Scroll down the page by pixel amount - if no amount is specified, scroll down one page",
        scroll_down,
        params.SCROLL,
    )
    registry.register(
        "scroll_up",
        "Scroll up the page by pixel amount - if no amount is specified, scroll up one page",
        scroll_up,
        params.SCROLL,
    )
    registry.register(
        "send_keys",
        "Send strings of special keys like Escape, Backspace, Insert, PageDown, Delete, Enter. "
        "Shortcuts such as `Control+o`, `Control+Shift+T` are supported as well.",
        send_keys,
        params.SEND_KEYS,
    )
    registry.register(
        "scroll_to_text",
        "If you dont find something which you want to interact with, scroll to it",
        scroll_to_text,
        params.SCROLL_TO_TEXT,
    )
    registry.register(
        "save_pdf",
        "Save the current page as a PDF file",
        partial(save_pdf, pdf_dir=config.pdf_dir),
        params.SAVE_PDF,
    )
