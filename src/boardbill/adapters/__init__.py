"""Adapters - I/O implementations of ports."""

from .trello_api import TrelloAdapter

__all__ = [
    "TrelloAdapter",
]
