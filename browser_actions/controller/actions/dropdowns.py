"""Native <select> dropdown actions.

Dropdowns may live in any frame of the page, so both actions try every
frame in order and use the first one that holds the element.
"""

from __future__ import annotations

import json
import logging

from ...config_schema import ControllerConfig
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver
from .elements import element_by_index


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())

LIST_OPTIONS_JS = """
(xpath) => {
    const select = document.evaluate(xpath, document, null,
        XPathResult.FIRST_ORDERED_NODE_TYPE, null).singleNodeValue;
    if (!select) return null;
    return {
        options: Array.from(select.options).map(opt => ({
            text: opt.text,
            value: opt.value,
            index: opt.index
        })),
        id: select.id,
        name: select.name
    };
}
"""

FIND_SELECT_JS = """
(xpath) => {
    try {
        const select = document.evaluate(xpath, document, null,
            XPathResult.FIRST_ORDERED_NODE_TYPE, null).singleNodeValue;
        if (!select) return null;
        if (select.tagName.toLowerCase() !== 'select') {
            return {
                error: `Found element but it's a ${select.tagName}, not a SELECT`,
                found: false
            };
        }
        return {
            id: select.id,
            name: select.name,
            found: true,
            tagName: select.tagName,
            optionCount: select.options.length,
            currentValue: select.value,
            availableOptions: Array.from(select.options).map(o => o.text.trim())
        };
    } catch (e) {
        return {error: e.toString(), found: false};
    }
}
"""


def format_options(options: list[dict]) -> list[str]:
    # JSON-encode the text so the model can copy it back exactly
    return [f"{opt['index']}: text={json.dumps(opt['text'])}" for opt in options]


async def get_dropdown_options(index: int, browser: BrowserDriver) -> ActionResult:
    element = await element_by_index(browser, index, "get_dropdown_options")
    if isinstance(element, ActionResult):
        return element
    try:
        all_options: list[str] = []
        for frame in range(await browser.frame_count()):
            try:
                found = await browser.evaluate(LIST_OPTIONS_JS, element.xpath, frame=frame)
            except Exception as e:
                logger.debug("Frame %d evaluation failed: %s", frame, e)
                continue
            if found:
                logger.debug(
                    "Found dropdown in frame %d (id=%s, name=%s)",
                    frame, found.get("id"), found.get("name"),
                )
                all_options.extend(format_options(found.get("options", [])))
    except Exception as e:
        logger.info("Failed to get dropdown options: %s", e)
        return ActionResult.failure(f"Error getting options: {e}")

    if not all_options:
        msg = "No options found in any frame for dropdown"
    else:
        msg = "\n".join(all_options) + "\nUse the exact text string in select_dropdown_option"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def select_dropdown_option(index: int, text: str, browser: BrowserDriver) -> ActionResult:
    element = await element_by_index(browser, index, "select_dropdown_option")
    if isinstance(element, ActionResult):
        return element
    if element.tag_name.lower() != "select":
        msg = f"Cannot select option: Element with index {index} is a {element.tag_name}, not a select"
        logger.info(msg)
        return ActionResult.failure(msg)

    try:
        for frame in range(await browser.frame_count()):
            try:
                info = await browser.evaluate(FIND_SELECT_JS, element.xpath, frame=frame)
                if not info or not info.get("found"):
                    if info:
                        logger.debug("Frame %d error: %s", frame, info.get("error"))
                    continue
                values = await browser.select_option(element.xpath, text, frame=frame)
            except Exception as e:
                logger.debug("Frame %d attempt failed: %s", frame, e)
                continue
            msg = f"selected option {text} with value {values}"
            logger.info("%s in frame %d", msg, frame)
            return ActionResult(extracted_content=msg, include_in_memory=True)
    except Exception as e:
        return ActionResult.failure(f"Selection failed: {e}")

    msg = f"Could not select option '{text}' in any frame"
    logger.info(msg)
    return ActionResult.failure(msg)


def register(registry: Registry, config: ControllerConfig) -> None:
    registry.register(
        "get_dropdown_options",
        "Get all options from a native dropdown",
        get_dropdown_options,
        params.GET_DROPDOWN_OPTIONS,
    )
    registry.register(
        "select_dropdown_option",
        "Select dropdown option for interactive element index by the text of the option you want to select",
        select_dropdown_option,
        params.SELECT_DROPDOWN_OPTION,
    )
