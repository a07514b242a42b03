"""Actions addressing interactive elements by their selector-map index.

The index is checked against the driver's selector map before anything is
touched. An unknown index is a model mistake and raises ValidationError;
failures of the interaction itself become unsuccessful results.
"""

from __future__ import annotations

import logging

from ...config_schema import ControllerConfig
from ...registry.errors import ValidationError
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver, DomElement


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())


async def element_by_index(browser: BrowserDriver, index: int, action: str) -> DomElement | ActionResult:
    """Resolve a highlight index to its element.

    Returns:
        The element, or a failed result when the driver could not read the
        selector map or the element.

    Raises:
        ValidationError: The index is not in the current selector map.
    """
    try:
        selector_map = await browser.selector_map()
    except Exception as e:
        logger.info("Selector map unavailable for %s: %s", action, e)
        return ActionResult.failure(f"Failed to read interactive elements: {e}")
    if index not in selector_map:
        raise ValidationError(
            f"Element with index {index} does not exist - retry or use alternative actions",
            action=action,
            errors=[f"index: {index}"],
        )
    try:
        return await browser.element_at(index)
    except Exception as e:
        logger.info("Element %s unavailable for %s: %s", index, action, e)
        return ActionResult.failure(f"Failed to locate element with index {index}: {e}")


async def click_element_by_index(
    index: int,
    xpath: str | None,
    browser: BrowserDriver,
) -> ActionResult:
    element = await element_by_index(browser, index, "click_element_by_index")
    if isinstance(element, ActionResult):
        return element

    if xpath and xpath != element.xpath:
        return ActionResult.failure(
            f"Element with index {index} no longer matches {xpath} - the page changed"
        )

    try:
        if await browser.is_file_uploader(element):
            msg = (
                f"Index {index} - has an element which opens file upload dialog. "
                f"To upload files please use a specific function to upload files"
            )
            logger.info(msg)
            return ActionResult(extracted_content=msg, include_in_memory=True)

        tabs_before = await browser.tab_count()
        download_path = await browser.click_element(element)
        if download_path:
            msg = f"Downloaded file to {download_path}"
        else:
            msg = f"Clicked button with index {index}: {element.text}"
        logger.info(msg)
        logger.debug("Element xpath: %s", element.xpath)

        if await browser.tab_count() > tabs_before:
            new_tab_msg = "New tab opened - switching to it"
            msg += f" - {new_tab_msg}"
            logger.info(new_tab_msg)
            await browser.switch_tab(-1)
    except Exception as e:
        logger.warning("Element not clickable with index %s - most likely the page changed", index)
        return ActionResult.failure(str(e))

    return ActionResult(extracted_content=msg, include_in_memory=True)


async def input_text(
    index: int,
    text: str,
    xpath: str | None,
    browser: BrowserDriver,
    has_sensitive_data: bool = False,
) -> ActionResult:
    element = await element_by_index(browser, index, "input_text")
    if isinstance(element, ActionResult):
        return element
    try:
        await browser.input_text(element, text)
    except Exception as e:
        return ActionResult.failure(f"Failed to input text into index {index}: {e}")

    if has_sensitive_data:
        msg = f"Input sensitive data into index {index}"
    else:
        msg = f"Input {text} into index {index}"
    logger.info(msg)
    logger.debug("Element xpath: %s", element.xpath)
    return ActionResult(extracted_content=msg, include_in_memory=True)


async def upload_file(
    index: int,
    path: str,
    browser: BrowserDriver,
    available_file_paths: list[str],
) -> ActionResult:
    if path not in available_file_paths:
        return ActionResult.failure(f"File path {path} is not available")

    element = await element_by_index(browser, index, "upload_file")
    if isinstance(element, ActionResult):
        return element
    try:
        if not await browser.is_file_uploader(element):
            return ActionResult.failure(f"No file upload element found at index {index}")
        await browser.upload_file(element, path)
    except Exception as e:
        return ActionResult.failure(f"Failed to upload file to index {index}: {e}")

    msg = f"Successfully uploaded file to index {index}"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


def register(registry: Registry, config: ControllerConfig) -> None:
    registry.register(
        "click_element_by_index", "Click element by index", click_element_by_index, params.CLICK_ELEMENT
    )
    registry.register(
        "input_text", "Input text into a input interactive element", input_text, params.INPUT_TEXT
    )
    registry.register(
        "upload_file",
        "Upload one of the available files to a file input element by index",
        upload_file,
        params.UPLOAD_FILE,
    )
