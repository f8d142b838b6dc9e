"""Economic calendar command for TradeFlow CLI."""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

console = Console()

IMPACT_COLORS = {"High": "red", "Medium": "yellow", "Low": "dim"}
SURPRISE_COLORS = {"beat": "green", "missed": "red", "met": "yellow"}


@click.command()
@click.option(
    "--impact", "-i",
    type=click.Choice(["High", "Medium", "Low"], case_sensitive=False),
    default=None,
    help="Only show events of this impact level.",
)
@click.option("--currency", "-c", type=str, default=None, help="Only show this currency (e.g. USD).")
def news(impact: Optional[str], currency: Optional[str]) -> None:
    """Show today's economic calendar.

    Uses Financial Modeling Prep when an API key is configured and falls
    back to sample data otherwise.

    \b
    Examples:
      tradeflow news
      tradeflow news -i high -c USD
    """
    from tradeflow.config import get_calendar_api_key, get_timezone, load_config
    from tradeflow.economic_calendar import fetch_economic_calendar, filter_by_impact

    config = load_config()

    with console.status("[bold green]Fetching economic calendar..."):
        result = fetch_economic_calendar(
            api_key=get_calendar_api_key(config),
            timezone=get_timezone(config),
        )

    events = filter_by_impact(result.events, impact)
    if currency:
        events = [event for event in events if event.currency.upper() == currency.upper()]

    source_tag = "[yellow]SAMPLE DATA[/yellow]" if result.is_fallback else "[green]LIVE[/green]"

    if not events:
        console.print(f"[dim]No matching events.[/dim] {source_tag}")
        return

    table = Table(title="Economic Calendar", show_header=True)
    table.add_column("Time", style="dim")
    table.add_column("Cur", style="cyan")
    table.add_column("Impact")
    table.add_column("Event")
    table.add_column("Actual", justify="right")
    table.add_column("Forecast", justify="right")
    table.add_column("Previous", justify="right")

    for event in sorted(events, key=lambda e: e.date):
        impact_color = IMPACT_COLORS[event.impact]
        actual = event.actual or "—"
        if event.surprise:
            color = SURPRISE_COLORS[event.surprise]
            actual = f"[{color}]{actual}[/{color}]"
        table.add_row(
            event.local_time.strftime("%H:%M") if event.local_time else "—",
            event.currency,
            f"[{impact_color}]{event.impact}[/{impact_color}]",
            event.event,
            actual,
            event.forecast or "—",
            event.previous or "—",
        )

    console.print(table)
    console.print(f"Source: {source_tag}")
