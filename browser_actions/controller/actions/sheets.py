"""Google Sheets keyboard-driven actions.

These are only offered on spreadsheet hosts (controller.sheets_domains).
Cell navigation goes through the Go To box (Control+G); reads copy the
selection and read it back from the clipboard.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from ...config_schema import ControllerConfig
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())

# Pause between keystrokes the sheet UI needs to catch up with
KEY_PAUSE = 0.1

READ_CLIPBOARD_JS = "() => navigator.clipboard.readText()"

PASTE_TSV_JS = """
(tsv) => {
    const clipboardData = new DataTransfer();
    clipboardData.setData('text/plain', tsv);
    document.activeElement.dispatchEvent(new ClipboardEvent('paste', {clipboardData}));
}
"""


async def select_range(browser: BrowserDriver, cell_or_range: str, typing_delay: float) -> None:
    await browser.press("Enter")
    await browser.press("Escape")
    await asyncio.sleep(KEY_PAUSE)
    await browser.press("Home")
    await browser.press("ArrowUp")
    await asyncio.sleep(KEY_PAUSE)
    await browser.press("Control+G")
    await asyncio.sleep(KEY_PAUSE * 2)
    await browser.type_text(cell_or_range, delay=typing_delay)
    await asyncio.sleep(KEY_PAUSE * 2)
    await browser.press("Enter")
    await asyncio.sleep(KEY_PAUSE * 2)
    await browser.press("Escape")


async def get_sheet_contents(browser: BrowserDriver) -> ActionResult:
    try:
        await browser.press("Enter")
        await browser.press("Escape")
        await browser.press("ControlOrMeta+A")
        await browser.press("ControlOrMeta+C")
        extracted_tsv = await browser.evaluate(READ_CLIPBOARD_JS)
    except Exception as e:
        msg = f"Failed to get sheet contents: {e}"
        logger.info(msg)
        return ActionResult.failure(msg)
    return ActionResult(extracted_content=extracted_tsv, include_in_memory=True)


async def select_cell_or_range(
    cell_or_range: str, browser: BrowserDriver, *, typing_delay: float
) -> ActionResult:
    try:
        await select_range(browser, cell_or_range, typing_delay)
    except Exception as e:
        return ActionResult.failure(f"Failed to select {cell_or_range}: {e}")
    return ActionResult(extracted_content=f"Selected cell {cell_or_range}")


async def get_range_contents(
    cell_or_range: str, browser: BrowserDriver, *, typing_delay: float
) -> ActionResult:
    try:
        await select_range(browser, cell_or_range, typing_delay)
        await browser.press("ControlOrMeta+C")
        await asyncio.sleep(KEY_PAUSE)
        extracted_tsv = await browser.evaluate(READ_CLIPBOARD_JS)
    except Exception as e:
        return ActionResult.failure(f"Failed to get contents of {cell_or_range}: {e}")
    return ActionResult(extracted_content=extracted_tsv, include_in_memory=True)


async def clear_selected_range(browser: BrowserDriver) -> ActionResult:
    try:
        await browser.press("Backspace")
    except Exception as e:
        return ActionResult.failure(f"Failed to clear selected range: {e}")
    return ActionResult(extracted_content="Cleared selected range")


async def input_selected_cell_text(
    text: str, browser: BrowserDriver, *, typing_delay: float
) -> ActionResult:
    try:
        await browser.type_text(text, delay=typing_delay)
        await browser.press("Enter")
        await browser.press("ArrowUp")
    except Exception as e:
        return ActionResult.failure(f"Failed to input text: {e}")
    return ActionResult(extracted_content=f"Inputted text {text}")


async def update_range_contents(
    range: str, new_contents_tsv: str, browser: BrowserDriver, *, typing_delay: float
) -> ActionResult:
    try:
        await select_range(browser, range, typing_delay)
        await browser.evaluate(PASTE_TSV_JS, new_contents_tsv)
    except Exception as e:
        return ActionResult.failure(f"Failed to update {range}: {e}")
    return ActionResult(extracted_content=f"Updated cell {range} with {new_contents_tsv}")


def register(registry: Registry, config: ControllerConfig) -> None:
    domains = config.sheets_domains

    def typed(handler):
        return partial(handler, typing_delay=config.typing_delay_seconds)

    registry.register(
        "get_sheet_contents",
        "Google Sheets: Get the contents of the entire sheet",
        get_sheet_contents,
        params.SHEET_ONLY,
        domains=domains,
    )
    registry.register(
        "select_cell_or_range",
        "Google Sheets: Select a specific cell or range of cells",
        typed(select_cell_or_range),
        params.CELL_OR_RANGE,
        domains=domains,
    )
    registry.register(
        "get_range_contents",
        "Google Sheets: Get the contents of a specific cell or range of cells",
        typed(get_range_contents),
        params.CELL_OR_RANGE,
        domains=domains,
    )
    registry.register(
        "clear_selected_range",
        "Google Sheets: Clear the currently selected cells",
        clear_selected_range,
        params.SHEET_ONLY,
        domains=domains,
    )
    registry.register(
        "input_selected_cell_text",
        "Google Sheets: Input text into the currently selected cell",
        typed(input_selected_cell_text),
        params.SHEET_TEXT,
        domains=domains,
    )
    registry.register(
        "update_range_contents",
        "Google Sheets: Batch update a range of cells",
        typed(update_range_contents),
        params.UPDATE_RANGE,
        domains=domains,
    )
