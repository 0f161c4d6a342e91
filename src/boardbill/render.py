"""Plain-text invoice formatting."""

from datetime import timedelta

from .core.invoice import Invoice
from .core.tiers import TIER_PRIORITY


def format_duration(td: timedelta) -> str:
    """Format a duration as hours and minutes, e.g. '2h 05m'."""
    minutes = int(td.total_seconds() // 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m"


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"


def format_invoice(invoice: Invoice) -> str:
    """Render an invoice as a fixed-width table, highest tier first."""
    lines = [
        f"Invoice {invoice.window_start.date().isoformat()} to {invoice.window_end.date().isoformat()}",
        "",
        f"{'Tier':<6}{'Rate/h':>12}{'Time':>12}{'Hours':>10}{'Price':>14}",
    ]
    for tier in TIER_PRIORITY:
        report = invoice.report(tier)
        lines.append(
            f"{tier.value:<6}"
            f"{format_money(report.rate_per_hour):>12}"
            f"{format_duration(report.total_duration):>12}"
            f"{report.hours:>10.2f}"
            f"{format_money(report.total_price):>14}"
        )
    lines.append("")
    lines.append(
        f"{'Total':<6}{'':>12}{format_duration(invoice.total_duration):>12}"
        f"{'':>10}{format_money(invoice.total_price):>14}"
    )
    return "\n".join(lines)
