"""subspace_tui components."""
from .select_list import DEFAULT_TITLE, SelectList, SelectListTheme

__all__ = [
    "DEFAULT_TITLE",
    "SelectList",
    "SelectListTheme",
]
