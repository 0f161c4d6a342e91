"""Pure tier classification - no I/O dependencies."""

from enum import Enum
from typing import Iterable


class Tier(Enum):
    """Price tier a card is billed under."""

    T1 = "T1"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"
    T5 = "T5"


# Highest tier first; the first label match wins.
TIER_PRIORITY = (Tier.T5, Tier.T4, Tier.T3, Tier.T2, Tier.T1)

DEFAULT_TIER = Tier.T1


def classify(labels: Iterable[str]) -> Tier:
    """
    Map a card's labels to exactly one tier.

    Unlabelled cards, or cards whose labels name no tier, fall back to T1.
    """
    label_set = set(labels)
    for tier in TIER_PRIORITY:
        if tier.value in label_set:
            return tier
    return DEFAULT_TIER
