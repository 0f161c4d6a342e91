"""Shared workflow layer between the CLI and any other front end.

Each workflow validates its inputs, talks to the board service through a
BoardRepository and hands plain domain objects back to the caller.
"""

import logging

from .core.board import Board
from .core.errors import Unauthorized
from .core.invoice import Invoice, build_invoice
from .core.request import InvoiceRequest
from .ports import BoardRepository

logger = logging.getLogger(__name__)


def list_boards(repo: BoardRepository) -> list[Board]:
    """Boards visible to the configured credentials."""
    return repo.fetch_boards()


def create_invoice(repo: BoardRepository, request: InvoiceRequest) -> Invoice:
    """
    Build the invoice for one board.

    The request is validated before any call to the board service. Card
    histories are fetched one card at a time and the first failure aborts
    the build.
    """
    request.validate()

    cards = repo.fetch_cards(request.board_id)
    logger.info(f"Billing {len(cards)} cards on board {request.board_id}")

    def fetch_events(card_id: str):
        events = repo.fetch_card_events(card_id)
        logger.debug(f"Card {card_id}: {len(events)} events")
        return events

    return build_invoice(
        cards,
        fetch_events,
        request.rates,
        request.window_start,
        request.window_end,
    )


def should_disable_submit(error: Exception) -> bool:
    """Only credential errors make retrying pointless until settings change."""
    return isinstance(error, Unauthorized)
