"""Mouse drag and drop between elements or raw coordinates."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from ...config_schema import ControllerConfig
from ...registry.sensitive import SecretMaskingFilter
from ...registry.service import Registry
from ...registry.views import ActionResult
from .. import params
from ..driver import BrowserDriver, Position


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())


async def _element_position(
    browser: BrowserDriver,
    selector: str,
    offset: Mapping[str, Any] | None,
) -> Position | None:
    box = await browser.bounding_box(selector)
    if box is None:
        return None
    if offset is not None:
        return Position(int(box.x + offset.get("x", 0)), int(box.y + offset.get("y", 0)))
    return box.center


async def _drag(
    browser: BrowserDriver,
    source: Position,
    target: Position,
    steps: int,
    delay_ms: int,
) -> None:
    await browser.mouse_move(source.x, source.y)
    await browser.mouse_down()
    steps = max(steps, 1)
    for i in range(1, steps + 1):
        ratio = i / steps
        await browser.mouse_move(
            int(source.x + (target.x - source.x) * ratio),
            int(source.y + (target.y - source.y) * ratio),
        )
        if delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)
    # Final move on the target so drop handlers see it
    await browser.mouse_move(target.x, target.y)
    await browser.mouse_up()


async def drag_drop(
    browser: BrowserDriver,
    element_source: str | None = None,
    element_target: str | None = None,
    element_source_offset: Mapping[str, Any] | None = None,
    element_target_offset: Mapping[str, Any] | None = None,
    coord_source_x: int | None = None,
    coord_source_y: int | None = None,
    coord_target_x: int | None = None,
    coord_target_y: int | None = None,
    steps: int = 10,
    delay_ms: int = 5,
) -> ActionResult:
    by_selector = bool(element_source and element_target)
    coords = (coord_source_x, coord_source_y, coord_target_x, coord_target_y)

    try:
        if by_selector:
            source = await _element_position(browser, element_source, element_source_offset)
            target = await _element_position(browser, element_target, element_target_offset)
            if source is None or target is None:
                return ActionResult.failure("Failed to find source or target element")
        elif all(c is not None for c in coords):
            source = Position(coord_source_x, coord_source_y)
            target = Position(coord_target_x, coord_target_y)
        else:
            return ActionResult.failure(
                "Must provide either source/target selectors or source/target coordinates"
            )

        try:
            await _drag(browser, source, target, steps, delay_ms)
        except Exception as e:
            return ActionResult.failure(f"Error during drag operation: {e}")
    except Exception as e:
        error_msg = f"Failed to perform drag and drop: {e}"
        logger.info(error_msg)
        return ActionResult.failure(error_msg)

    if by_selector:
        msg = f"Dragged element '{element_source}' to '{element_target}'"
    else:
        msg = f"Dragged from ({source.x}, {source.y}) to ({target.x}, {target.y})"
    logger.info(msg)
    return ActionResult(extracted_content=msg, include_in_memory=True)


def register(registry: Registry, config: ControllerConfig) -> None:
    registry.register(
        "drag_drop",
        "Drag and drop elements or between coordinates on the page - useful for canvas drawing, "
        "sortable lists, sliders, file uploads, and UI rearrangement",
        drag_drop,
        params.drag_drop_params(config.drag_steps, config.drag_delay_ms),
    )
