# Built-in browser action catalogue
from .driver import BrowserDriver, DomElement, ElementBox, ExtractionModel, Position
from .service import Controller

__all__ = [
    "Controller",
    "BrowserDriver",
    "ExtractionModel",
    "DomElement",
    "ElementBox",
    "Position",
]
