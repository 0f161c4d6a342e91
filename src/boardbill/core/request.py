"""Invoice request parsing - turns raw form/CLI strings into typed values."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Mapping

from .errors import InvalidRequest
from .invoice import Rates, validate_window
from .tiers import TIER_PRIORITY

BOARD_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def day_start(d: date) -> datetime:
    """A calendar date as the instant it begins, in UTC."""
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


@dataclass(frozen=True)
class InvoiceRequest:
    """A validated request to bill one board over a date range."""

    board_id: str
    start_date: date
    end_date: date
    rates: Rates

    @property
    def window_start(self) -> datetime:
        return day_start(self.start_date)

    @property
    def window_end(self) -> datetime:
        return day_start(self.end_date)

    def validate(self) -> None:
        """Check every precondition that must hold before calling the board service."""
        validate_board_id(self.board_id)
        validate_window(self.window_start, self.window_end)
        self.rates.validate()


def validate_board_id(board_id: str) -> None:
    if not BOARD_ID_PATTERN.match(board_id or ""):
        raise InvalidRequest(f"Invalid trello board ID: {board_id}")


def _parse_date(value: str | None, label: str) -> date:
    try:
        return date.fromisoformat((value or "").strip())
    except ValueError as e:
        raise InvalidRequest(f"Parsing {label} failed: {e}") from e


def _parse_rate(value: str | float | None, tier_name: str) -> float:
    try:
        rate = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidRequest(f"Parsing {tier_name} rate failed: {value!r}") from e
    if not rate >= 0:
        raise InvalidRequest(f"{tier_name} rate cannot be less than zero")
    return rate


def parse_invoice_request(values: Mapping[str, str]) -> InvoiceRequest:
    """
    Parse an invoice request from string values.

    Expected keys: board-id, start-date, end-date, t1..t5.

    Raises:
        InvalidRequest: the first field that fails to parse or validate.
    """
    board_id = (values.get("board-id") or "").strip()
    validate_board_id(board_id)

    start_date = _parse_date(values.get("start-date"), "start date")
    end_date = _parse_date(values.get("end-date"), "end date")
    if start_date >= end_date:
        raise InvalidRequest("Start date must be earlier than end date.")

    rates = {
        tier.value.lower(): _parse_rate(values.get(tier.value.lower()), tier.value)
        for tier in TIER_PRIORITY
    }

    return InvoiceRequest(
        board_id=board_id,
        start_date=start_date,
        end_date=end_date,
        rates=Rates(**rates),
    )
