# Built-in action groups, in the order they are registered
from . import content, drag_drop, dropdowns, elements, navigation, sheets, tabs

ACTION_GROUPS = (navigation, elements, tabs, content, dropdowns, drag_drop, sheets)

__all__ = ["ACTION_GROUPS"]
