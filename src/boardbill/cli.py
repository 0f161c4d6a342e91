"""boardbill CLI - invoices from Trello board activity."""

import json
import logging
import sys

import click

from .adapters.trello_api import TrelloAdapter
from .config import CONFIG_FILE, load_config
from .core.errors import BillingError
from .core.request import parse_invoice_request
from .core.tiers import TIER_PRIORITY
from .render import format_invoice
from .workflows import create_invoice, list_boards, should_disable_submit


def _fail(error: BillingError) -> None:
    """Report a billing error and exit."""
    click.echo(f"Error: {error}", err=True)
    if should_disable_submit(error):
        click.echo(
            "Check TRELLO_API_KEY and TRELLO_TOKEN (or boardbill.conf) and try again.",
            err=True,
        )
        sys.exit(2)
    sys.exit(1)


@click.group()
@click.version_option(package_name="boardbill")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """boardbill - bill in-progress time tracked on a Trello board."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def boards(as_json: bool):
    """List boards visible to your Trello credentials."""
    try:
        found = list_boards(TrelloAdapter(load_config()))
    except BillingError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([{"id": b.id, "name": b.name} for b in found], indent=2))
        return

    if not found:
        click.echo("No boards found.")
        return

    for board in found:
        click.echo(f"{board.id}  {board.name}")


@main.command()
@click.argument("board_id")
@click.option("--start", "start_date", required=True, help="First day billed (YYYY-MM-DD)")
@click.option("--end", "end_date", required=True, help="Window end, exclusive day (YYYY-MM-DD)")
@click.option("--t1", type=str, default=None, help="T1 hourly rate")
@click.option("--t2", type=str, default=None, help="T2 hourly rate")
@click.option("--t3", type=str, default=None, help="T3 hourly rate")
@click.option("--t4", type=str, default=None, help="T4 hourly rate")
@click.option("--t5", type=str, default=None, help="T5 hourly rate")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def invoice(
    board_id: str,
    start_date: str,
    end_date: str,
    t1: str | None,
    t2: str | None,
    t3: str | None,
    t4: str | None,
    t5: str | None,
    as_json: bool,
):
    """Build an invoice for BOARD_ID over a date range."""
    config = load_config()
    defaults = config.rates()
    given = {"t1": t1, "t2": t2, "t3": t3, "t4": t4, "t5": t5}
    values = {
        "board-id": board_id,
        "start-date": start_date,
        "end-date": end_date,
    }
    for tier in TIER_PRIORITY:
        rate = given[tier.value.lower()]
        values[tier.value.lower()] = rate if rate is not None else str(defaults.for_tier(tier))

    try:
        request = parse_invoice_request(values)
        result = create_invoice(TrelloAdapter(config), request)
    except BillingError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(format_invoice(result))


@main.command("config")
def show_config():
    """Show configuration status."""
    config = load_config()
    status = "found" if CONFIG_FILE.exists() else "missing"
    click.echo(f"Config file: {CONFIG_FILE} ({status})")
    click.echo(f"Trello API key: {'set' if config.trello_api_key else 'not set'}")
    click.echo(f"Trello token: {'set' if config.trello_token else 'not set'}")
    click.echo(f"Credentials: {'complete' if config.has_credentials else 'incomplete'}")
    click.echo(f"Request timeout: {config.request_timeout:g}s")
    defaults = config.rates()
    rates = ", ".join(f"{tier.value}={defaults.for_tier(tier):g}" for tier in TIER_PRIORITY)
    click.echo(f"Default rates: {rates}")


if __name__ == "__main__":
    main()
