"""Trello API adapter - HTTP client for boards, cards and card actions."""

import logging

import requests

from boardbill.config import Config, load_config
from boardbill.core.board import Board, Card
from boardbill.core.errors import InvalidKey, InvalidToken, Unauthorized, UpstreamError
from boardbill.core.events import Event

logger = logging.getLogger(__name__)

API_BASE = "https://api.trello.com/1/"


class TrelloAdapter:
    """
    Thin Trello JSON API client.

    Implements BoardRepository protocol. Only fetches what billing needs.
    No business logic - just I/O and error translation.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()

    def _ensure_credentials(self) -> None:
        if not self.config.trello_api_key or not self.config.trello_token:
            raise Unauthorized(
                "The Trello API key and token need to be supplied "
                "(TRELLO_API_KEY / TRELLO_TOKEN or boardbill.conf)."
            )

    def _api_request(self, path: str) -> dict | list:
        """Make an authenticated GET request and decode the JSON body."""
        self._ensure_credentials()
        logger.debug(f"GET {API_BASE}{path}")

        try:
            resp = self._session.get(
                f"{API_BASE}{path}",
                params={"key": self.config.trello_api_key, "token": self.config.trello_token},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Trello request failed: {e}") from e

        if resp.status_code > 299:
            body = resp.text.strip()
            match body:
                case "invalid key":
                    raise InvalidKey()
                case "invalid app token":
                    raise InvalidToken()
                case _:
                    raise UpstreamError(f"Trello request failed: {body or resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"Trello returned invalid JSON for {path}") from e

    def fetch_boards(self) -> list[Board]:
        """Calls GET members/me/boards."""
        data = self._api_request("members/me/boards")
        try:
            return [Board.from_api(b) for b in data]
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Unexpected boards response: {e}") from e

    def fetch_cards(self, board_id: str) -> list[Card]:
        """Calls GET boards/{board_id}/cards."""
        data = self._api_request(f"boards/{board_id}/cards")
        try:
            return [Card.from_api(c) for c in data]
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Unexpected cards response: {e}") from e

    def fetch_card_events(self, card_id: str) -> list[Event]:
        """Calls GET cards/{card_id}/actions."""
        # TODO: use Trello batch requests to fetch several cards per round trip
        data = self._api_request(f"cards/{card_id}/actions")
        if not isinstance(data, list):
            raise UpstreamError(f"Unexpected actions response for card {card_id}")
        return [Event.from_api(action, card_id) for action in data]
