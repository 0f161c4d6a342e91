"""Ports - interfaces/protocols for external dependencies."""

from .board_repo import BoardRepository

__all__ = [
    "BoardRepository",
]
