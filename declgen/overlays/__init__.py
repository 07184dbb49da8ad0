"""Documentation overlay records, persistence and templating."""

from .model import DocOverlay, split_identity
from .store import OverlayStore
from .templating import DEFAULT_TEMPLATES, check_template, render

__all__ = [
    "DEFAULT_TEMPLATES",
    "DocOverlay",
    "OverlayStore",
    "check_template",
    "render",
    "split_identity",
]
