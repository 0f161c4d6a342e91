"""Board repository interface."""

from typing import Protocol

from boardbill.core.board import Board, Card
from boardbill.core.events import Event


class BoardRepository(Protocol):
    """Interface for fetching boards, cards and card histories from any backend."""

    def fetch_boards(self) -> list[Board]:
        """Fetch the boards visible to the current credentials."""
        ...

    def fetch_cards(self, board_id: str) -> list[Card]:
        """Fetch all cards on a board."""
        ...

    def fetch_card_events(self, card_id: str) -> list[Event]:
        """Fetch a card's action log, in whatever order the backend returns it."""
        ...
