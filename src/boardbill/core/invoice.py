"""Pure invoice aggregation logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable, Mapping, Sequence

from .board import Card
from .errors import InvalidRequest
from .events import ActiveInterval, Event, reconstruct_intervals, total_duration
from .tiers import TIER_PRIORITY, Tier, classify

ONE_HOUR = timedelta(hours=1)

CardEvents = Callable[[str], Sequence[Event]] | Mapping[str, Sequence[Event]]


@dataclass(frozen=True)
class Rates:
    """Hourly rate per tier."""

    t1: float = 0.0
    t2: float = 0.0
    t3: float = 0.0
    t4: float = 0.0
    t5: float = 0.0

    def for_tier(self, tier: Tier) -> float:
        return getattr(self, tier.value.lower())

    def validate(self) -> None:
        """Reject negative (or NaN) rates."""
        for tier in TIER_PRIORITY:
            rate = self.for_tier(tier)
            # NaN fails every comparison, so test the accepted range
            if not rate >= 0:
                raise InvalidRequest(f"{tier.value} rate cannot be less than zero")


def validate_window(window_start: datetime, window_end: datetime) -> None:
    if not window_start < window_end:
        raise InvalidRequest("Start date must be earlier than end date.")


@dataclass
class TierTotals:
    """
    Running per-tier duration totals.

    accumulate() is a plain sum per tier, so cards can be folded in any order
    with the same result.
    """

    durations: dict[Tier, timedelta] = field(
        default_factory=lambda: {tier: timedelta() for tier in Tier}
    )

    def accumulate(self, tier: Tier, intervals: Iterable[ActiveInterval]) -> None:
        self.durations[tier] += total_duration(intervals)

    def total(self, tier: Tier) -> timedelta:
        return self.durations[tier]

    def merge(self, other: "TierTotals") -> "TierTotals":
        """Combine two partial folds into a new one."""
        merged = TierTotals()
        for tier in Tier:
            merged.durations[tier] = self.durations[tier] + other.durations[tier]
        return merged


@dataclass(frozen=True)
class TierReport:
    """Billed time and price for one tier."""

    rate_per_hour: float
    total_duration: timedelta
    total_price: float

    @property
    def hours(self) -> float:
        return self.total_duration / ONE_HOUR

    def to_dict(self) -> dict:
        return {
            "rate_per_hour": self.rate_per_hour,
            "duration_seconds": self.total_duration.total_seconds(),
            "hours": self.hours,
            "price": self.total_price,
        }


@dataclass(frozen=True)
class Invoice:
    """A billing report for one board over one window."""

    window_start: datetime
    window_end: datetime
    reports: Mapping[Tier, TierReport]
    total_price: float

    def report(self, tier: Tier) -> TierReport:
        return self.reports[tier]

    @property
    def total_duration(self) -> timedelta:
        return sum((r.total_duration for r in self.reports.values()), timedelta())

    def to_dict(self) -> dict:
        """Plain data for JSON output. Tiers are listed highest first."""
        return {
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "tiers": {tier.value: self.reports[tier].to_dict() for tier in TIER_PRIORITY},
            "total_price": self.total_price,
        }


def price_totals(
    totals: TierTotals,
    rates: Rates,
    window_start: datetime,
    window_end: datetime,
) -> Invoice:
    """
    Price accumulated durations into an Invoice.

    price = hours * rate, with hours = duration / 1h and no rounding before
    the multiplication.
    """
    reports = {}
    for tier in TIER_PRIORITY:
        duration = totals.total(tier)
        rate = rates.for_tier(tier)
        reports[tier] = TierReport(
            rate_per_hour=rate,
            total_duration=duration,
            total_price=(duration / ONE_HOUR) * rate,
        )

    return Invoice(
        window_start=window_start,
        window_end=window_end,
        reports=reports,
        total_price=sum(r.total_price for r in reports.values()),
    )


def build_invoice(
    cards: Iterable[Card],
    card_events: CardEvents,
    rates: Rates,
    window_start: datetime,
    window_end: datetime,
) -> Invoice:
    """
    Build an invoice from cards and their event logs.

    card_events is either a mapping of card ID to events or a callable that
    returns a card's events. Cards are processed one at a time; the first
    error aborts the whole build.

    Raises:
        InvalidRequest: window not strictly ordered, or a negative rate.
        MalformedEvent: a card's event log cannot be reconstructed.
    """
    validate_window(window_start, window_end)
    rates.validate()

    if callable(card_events):
        events_for = card_events
    else:
        def events_for(card_id: str) -> Sequence[Event]:
            return card_events.get(card_id, ())

    totals = TierTotals()
    for card in cards:
        intervals = reconstruct_intervals(events_for(card.id), window_start, window_end)
        totals.accumulate(classify(card.labels), intervals)

    return price_totals(totals, rates, window_start, window_end)
