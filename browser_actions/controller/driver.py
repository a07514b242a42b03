"""Collaborator interfaces the built-in actions are written against.

The registry never talks to a browser itself. A BrowserDriver adapter
(Playwright, CDP, a test double) is passed in the DependencyBundle as
`browser` and the built-in handlers call it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ..registry.views import PageState


@dataclass(frozen=True)
class DomElement:
    """An interactive element from the driver's selector map."""

    index: int
    tag_name: str
    xpath: str
    text: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ElementBox:
    """Element bounding box in viewport pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Position:
        return Position(int(self.x + self.width / 2), int(self.y + self.height / 2))


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@runtime_checkable
class BrowserDriver(Protocol):
    """Browser operations the built-in actions depend on.

    Every method is a coroutine. Frames are addressed by their index in the
    current page, 0 being the main frame.
    """

    async def current_page(self) -> PageState:
        ...

    async def navigate(self, url: str) -> None:
        ...

    async def go_back(self) -> None:
        ...

    async def wait_for_load(self) -> None:
        ...

    async def selector_map(self) -> Mapping[int, DomElement]:
        """Interactive elements of the current page keyed by highlight index."""
        ...

    async def element_at(self, index: int) -> DomElement:
        ...

    async def click_element(self, element: DomElement) -> str | None:
        """Click an element.

        Returns:
            Path of a file the click downloaded, if any.
        """
        ...

    async def is_file_uploader(self, element: DomElement) -> bool:
        ...

    async def input_text(self, element: DomElement, text: str) -> None:
        ...

    async def upload_file(self, element: DomElement, path: str) -> None:
        ...

    async def tab_count(self) -> int:
        ...

    async def switch_tab(self, page_id: int) -> None:
        """Activate a tab; negative ids count from the last tab."""
        ...

    async def new_tab(self, url: str) -> None:
        ...

    async def close_tab(self, page_id: int) -> None:
        ...

    async def frame_count(self) -> int:
        ...

    async def evaluate(self, script: str, arg: Any = None, *, frame: int = 0) -> Any:
        ...

    async def select_option(self, xpath: str, text: str, *, frame: int = 0) -> list[str]:
        """Select an option of a native <select> by its text; returns the selected values."""
        ...

    async def page_content(self) -> str:
        """Readable text (markdown) of the current page."""
        ...

    async def scroll(self, amount: int | None = None, *, up: bool = False) -> None:
        """Scroll by `amount` pixels, or one viewport height when None."""
        ...

    async def scroll_to_text(self, text: str) -> bool:
        """Scroll the first element containing `text` into view; False if none."""
        ...

    async def press(self, keys: str) -> None:
        ...

    async def type_text(self, text: str, delay: float = 0) -> None:
        ...

    async def mouse_move(self, x: int, y: int) -> None:
        ...

    async def mouse_down(self) -> None:
        ...

    async def mouse_up(self) -> None:
        ...

    async def bounding_box(self, selector: str) -> ElementBox | None:
        """Box of the first element matching a CSS selector, None if there is none."""
        ...

    async def export_pdf(self, path: str) -> None:
        ...


@runtime_checkable
class ExtractionModel(Protocol):
    """Language model used to pull information out of page content."""

    async def summarize(self, prompt: str) -> str:
        ...
