"""
Highlights domain package.

Public API:
- Domain models: Highlight, NewHighlight
- Store: HighlightStore

"""
from .models import Highlight, NewHighlight
from .store import HighlightStore

__all__ = ["Highlight",
           "NewHighlight",
             "HighlightStore",
             ]
