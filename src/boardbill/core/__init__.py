"""Functional core - pure business logic with no I/O."""

from .board import Board, Card
from .errors import (
    BillingError,
    InvalidKey,
    InvalidRequest,
    InvalidToken,
    MalformedEvent,
    Unauthorized,
    UpstreamError,
)
from .events import ActiveInterval, Event, is_active_list_name, reconstruct_intervals
from .invoice import Invoice, Rates, TierReport, TierTotals, build_invoice
from .request import InvoiceRequest, parse_invoice_request
from .tiers import Tier, classify

__all__ = [
    # Board
    "Board",
    "Card",
    # Errors
    "BillingError",
    "InvalidKey",
    "InvalidRequest",
    "InvalidToken",
    "MalformedEvent",
    "Unauthorized",
    "UpstreamError",
    # Events
    "ActiveInterval",
    "Event",
    "is_active_list_name",
    "reconstruct_intervals",
    # Invoice
    "Invoice",
    "Rates",
    "TierReport",
    "TierTotals",
    "build_invoice",
    # Request
    "InvoiceRequest",
    "parse_invoice_request",
    # Tiers
    "Tier",
    "classify",
]
