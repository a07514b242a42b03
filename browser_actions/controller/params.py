"""Parameter schemas of the built-in actions.

Schemas whose defaults come from configuration are built by functions;
the rest are module constants.
"""

from __future__ import annotations

from ..registry.schema import FieldSpec, ParameterSchema


BROWSER = ("browser",)

DONE = ParameterSchema.of(
    FieldSpec("text", description="Final answer or summary for the user"),
    FieldSpec("success", "boolean", description="True only if the whole task is complete"),
)

SEARCH_GOOGLE = ParameterSchema.of(FieldSpec("query"), requires=BROWSER)
GO_TO_URL = ParameterSchema.of(FieldSpec("url"), requires=BROWSER)
GO_BACK = ParameterSchema.of(requires=BROWSER)

CLICK_ELEMENT = ParameterSchema.of(
    FieldSpec("index", "integer"),
    FieldSpec("xpath", required=False),
    requires=BROWSER,
)
INPUT_TEXT = ParameterSchema.of(
    FieldSpec("index", "integer"),
    FieldSpec("text"),
    FieldSpec("xpath", required=False),
    requires=("browser", "has_sensitive_data"),
)
UPLOAD_FILE = ParameterSchema.of(
    FieldSpec("index", "integer"),
    FieldSpec("path"),
    requires=("browser", "available_file_paths"),
)

SWITCH_TAB = ParameterSchema.of(FieldSpec("page_id", "integer"), requires=BROWSER)
OPEN_TAB = ParameterSchema.of(FieldSpec("url"), requires=BROWSER)
CLOSE_TAB = ParameterSchema.of(FieldSpec("page_id", "integer"), requires=BROWSER)

EXTRACT_CONTENT = ParameterSchema.of(
    FieldSpec("goal"),
    requires=("browser", "page_extraction_llm"),
)
SCROLL = ParameterSchema.of(
    FieldSpec("amount", "integer", required=False, description="Pixels; omit for one page"),
    requires=BROWSER,
)
SEND_KEYS = ParameterSchema.of(
    FieldSpec("keys", description="Key or shortcut, e.g. Escape, Control+o"),
    requires=BROWSER,
)
SCROLL_TO_TEXT = ParameterSchema.of(FieldSpec("text"), requires=BROWSER)
SAVE_PDF = ParameterSchema.of(requires=BROWSER)

GET_DROPDOWN_OPTIONS = ParameterSchema.of(FieldSpec("index", "integer"), requires=BROWSER)
SELECT_DROPDOWN_OPTION = ParameterSchema.of(
    FieldSpec("index", "integer"),
    FieldSpec("text"),
    requires=BROWSER,
)

SHEET_ONLY = ParameterSchema.of(requires=BROWSER)
CELL_OR_RANGE = ParameterSchema.of(FieldSpec("cell_or_range"), requires=BROWSER)
SHEET_TEXT = ParameterSchema.of(FieldSpec("text"), requires=BROWSER)
UPDATE_RANGE = ParameterSchema.of(
    FieldSpec("range"),
    FieldSpec("new_contents_tsv"),
    requires=BROWSER,
)


def wait_params(default_seconds: int) -> ParameterSchema:
    return ParameterSchema.of(FieldSpec("seconds", "integer", default=default_seconds))


def structured_done_params(model_name: str) -> ParameterSchema:
    """done() schema when the final answer must follow an output model."""
    return ParameterSchema.of(
        FieldSpec("success", "boolean", default=True),
        FieldSpec("data", "object", description=f"Result matching {model_name}"),
    )


def drag_drop_params(steps: int, delay_ms: int) -> ParameterSchema:
    """Either both selectors or all four coordinates must be given."""
    return ParameterSchema.of(
        FieldSpec("element_source", required=False, description="CSS selector of the element to drag"),
        FieldSpec("element_target", required=False, description="CSS selector of the drop target"),
        FieldSpec("element_source_offset", "object", required=False, description="{x, y} inside the source"),
        FieldSpec("element_target_offset", "object", required=False, description="{x, y} inside the target"),
        FieldSpec("coord_source_x", "integer", required=False),
        FieldSpec("coord_source_y", "integer", required=False),
        FieldSpec("coord_target_x", "integer", required=False),
        FieldSpec("coord_target_y", "integer", required=False),
        FieldSpec("steps", "integer", default=steps),
        FieldSpec("delay_ms", "integer", default=delay_ms),
        requires=BROWSER,
    )


__all__ = [
    "DONE", "SEARCH_GOOGLE", "GO_TO_URL", "GO_BACK",
    "CLICK_ELEMENT", "INPUT_TEXT", "UPLOAD_FILE",
    "SWITCH_TAB", "OPEN_TAB", "CLOSE_TAB",
    "EXTRACT_CONTENT", "SCROLL", "SEND_KEYS", "SCROLL_TO_TEXT", "SAVE_PDF",
    "GET_DROPDOWN_OPTIONS", "SELECT_DROPDOWN_OPTION",
    "SHEET_ONLY", "CELL_OR_RANGE", "SHEET_TEXT", "UPDATE_RANGE",
    "wait_params", "structured_done_params", "drag_drop_params",
]
