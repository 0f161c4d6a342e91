"""Board and card domain objects."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Board:
    """A board the credentials can see."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict) -> "Board":
        return cls(id=data["id"], name=data.get("name", ""))


@dataclass(frozen=True)
class Card:
    """A unit of trackable work. Labels are opaque tier markers."""

    id: str
    labels: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_api(cls, data: dict) -> "Card":
        """Create Card from a Trello board cards response entry."""
        labels = frozenset(
            label["name"] for label in data.get("labels") or [] if label.get("name")
        )
        return cls(id=data["id"], labels=labels)
