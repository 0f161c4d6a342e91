"""Pure event log logic - reconstructs active intervals from list changes."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from .errors import MalformedEvent

LIST_CHANGED = "listChanged"

# A list is "in progress" when its name carries this marker, e.g. "Doing (IP)".
ACTIVE_LIST_MARKER = "(IP)"


def is_active_list_name(name: str) -> bool:
    """Whether a list name marks its cards as actively worked on."""
    return ACTIVE_LIST_MARKER in name


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp. Naive values are taken as UTC."""
    try:
        ts = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise MalformedEvent(f"Unparseable event date: {value!r}") from e
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class Event:
    """A timestamped fact about a card. Only list changes matter for billing."""

    card_id: str
    timestamp: datetime
    kind: str
    list_before: str | None = None
    list_after: str | None = None

    @property
    def is_list_change(self) -> bool:
        return self.kind == LIST_CHANGED

    @classmethod
    def from_api(cls, data: dict, card_id: str = "") -> "Event":
        """Create Event from a Trello card action.

        A card move is reported by Trello as an ``updateCard`` action whose
        data carries ``listBefore``/``listAfter``. Other actions keep their
        Trello type and are ignored during reconstruction.
        """
        if "date" not in data:
            raise MalformedEvent(f"Action {data.get('id', '?')} has no date")
        timestamp = parse_timestamp(data["date"])

        kind = data.get("type", "")
        payload = data.get("data") or {}
        if kind == "updateCard" and ("listBefore" in payload or "listAfter" in payload):
            return cls(
                card_id=card_id,
                timestamp=timestamp,
                kind=LIST_CHANGED,
                list_before=_list_name(payload.get("listBefore")),
                list_after=_list_name(payload.get("listAfter")),
            )
        return cls(card_id=card_id, timestamp=timestamp, kind=kind)


def _list_name(value) -> str | None:
    if isinstance(value, dict):
        name = value.get("name")
        return name if isinstance(name, str) else None
    return None


@dataclass(frozen=True)
class ActiveInterval:
    """Continuous active time for one card, starting inside the billing window."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def sort_events(events: Iterable[Event]) -> list[Event]:
    """Sort events by timestamp, compared in whole seconds.

    Events within the same second keep their input order.
    """
    return sorted(events, key=lambda e: int(e.timestamp.timestamp()))


def reconstruct_intervals(
    events: Iterable[Event],
    window_start: datetime,
    window_end: datetime,
) -> list[ActiveInterval]:
    """
    Derive the active intervals of a single card within a billing window.

    Pure function - no I/O.

    Events outside [window_start, window_end] are dropped before the state
    machine sees them, so a transition that happened outside the window is
    lost. A card still active when the log runs out is billed up to the last
    event in the whole log, even one past window_end, and never up to
    window_end itself.

    Raises:
        MalformedEvent: a list change without readable list names.
    """
    intervals: list[ActiveInterval] = []
    active = False
    interval_start: datetime | None = None
    last_seen: datetime | None = None

    for event in sort_events(events):
        last_seen = event.timestamp
        if event.timestamp < window_start or event.timestamp > window_end:
            continue

        if not event.is_list_change:
            continue

        if not isinstance(event.list_before, str) or not isinstance(event.list_after, str):
            raise MalformedEvent(
                f"List change on card {event.card_id or '?'} at "
                f"{event.timestamp.isoformat()} is missing list names"
            )

        was_active = is_active_list_name(event.list_before)
        now_active = is_active_list_name(event.list_after)

        if not active and now_active and not was_active:
            active = True
            interval_start = event.timestamp
        elif active and was_active and not now_active:
            intervals.append(ActiveInterval(start=interval_start, end=event.timestamp))
            active = False

    if active:
        intervals.append(ActiveInterval(start=interval_start, end=last_seen))

    return intervals


def total_duration(intervals: Iterable[ActiveInterval]) -> timedelta:
    """Sum interval durations."""
    return sum((i.duration for i in intervals), timedelta())
