"""Journal commands for TradeFlow CLI.

Handles journaling new trades and browsing the trade log.
"""

from datetime import datetime
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

TRADE_TYPES = ("15min PT", "CT", "ECT")
BIASES = ("Bullish", "Bearish")
RANGE_TYPES = ("LSL", "MIT", "IDM", "mChoCH")
POI_TYPES = ("OB", "Wick", "LTF Refinement")
ENTRY_TYPES = ("Limit", "Market")
OUTCOMES = ("Win", "Loss", "BE")
EMOTIONS = ("Calm", "FOMO", "Hesitation", "Revenge")


def _get_config():
    """Lazily load configuration."""
    from tradeflow.config import load_config

    return load_config()


def _get_repository(config: Optional[dict] = None):
    """Get the trade repository on the configured store."""
    from tradeflow.config import get_data_store
    from tradeflow.journal import TradeRepository

    return TradeRepository(get_data_store(config))


def _auto_lot_size(repo, config, pair: str, entry_price: str, stop_loss: str) -> Optional[str]:
    """Lot size from the saved balance and configured risk, if computable."""
    from tradeflow.calculator import PositionSizeError, calculate_position_size
    from tradeflow.cli.calc import get_saved_balance
    from tradeflow.config import get_account_settings
    from tradeflow.pairs import DEFAULT_PAIR_SYMBOL, get_pair

    forex_pair = get_pair(pair)
    if forex_pair is None:
        console.print(f"[yellow]Unknown pair '{pair}', sizing as {DEFAULT_PAIR_SYMBOL}.[/yellow]")
        forex_pair = get_pair(pair, default=True)

    settings = get_account_settings(config)
    try:
        result = calculate_position_size(
            get_saved_balance(repo.store, config),
            settings["risk_percent"],
            entry_price,
            stop_loss,
            forex_pair,
        )
    except PositionSizeError as e:
        console.print(f"[yellow]Could not size position: {e}[/yellow]")
        return None
    return f"{result.lot_size:.2f}" if result else None


def _tri(value) -> str:
    from tradeflow.models import TriState

    if value is TriState.YES:
        return "[green]Yes[/green]"
    if value is TriState.NO:
        return "[red]No[/red]"
    return "[dim]—[/dim]"


def _outcome_style(outcome: str) -> str:
    return {"Win": "green", "Loss": "red", "BE": "yellow"}.get(outcome, "dim")


@click.command()
@click.option("--pair", "-p", type=str, default="", help="Pair key (EU, GU, UJ, UF, UCAD, ...).")
@click.option("--type", "-t", "trade_type", type=click.Choice(TRADE_TYPES), default=None)
@click.option("--date", "-d", "trade_date", type=str, default=None, help="Trade date. Defaults to today.")
@click.option("--time", "trade_time", type=str, default="", help="Entry time (HH:MM).")
@click.option("--bias", type=click.Choice(BIASES), default=None, help="1H bias.")
@click.option("--range", "range_type", type=click.Choice(RANGE_TYPES), default=None)
@click.option("--poi", "poi_type", type=click.Choice(POI_TYPES), default=None)
@click.option("--entry", "-e", "entry_price", type=str, default="", help="Entry price.")
@click.option("--sl", "-s", "stop_loss", type=str, default="", help="Stop-loss price.")
@click.option("--tp", "take_profit", type=str, default="", help="Take-profit price.")
@click.option("--entry-type", type=click.Choice(ENTRY_TYPES), default=None)
@click.option("--lot-size", type=str, default="", help="Lot size traded.")
@click.option(
    "--auto-size",
    is_flag=True,
    default=False,
    help="Fill the lot size from the saved balance and risk.",
)
@click.option("--poi-tapped/--no-poi-tapped", default=None, help="POI tapped correctly?")
@click.option("--choch/--no-choch", "choch_confirmed", default=None, help="3min ChoCH confirmed?")
@click.option("--outcome", "-o", type=click.Choice(OUTCOMES), default=None)
@click.option("--pnl", "profit_loss", type=str, default="", help="Profit/loss amount.")
@click.option("--emotion", type=click.Choice(EMOTIONS), default=None)
@click.option("--followed-rules/--broke-rules", default=None, help="Did you follow your rules?")
@click.option("--mistakes", "-m", type=str, default="", help="Mistakes made on this trade.")
@click.option("--screenshot", "screenshots", multiple=True, help="Screenshot path or URL.")
def log(
    pair: str,
    trade_type: Optional[str],
    trade_date: Optional[str],
    trade_time: str,
    bias: Optional[str],
    range_type: Optional[str],
    poi_type: Optional[str],
    entry_price: str,
    stop_loss: str,
    take_profit: str,
    entry_type: Optional[str],
    lot_size: str,
    auto_size: bool,
    poi_tapped: Optional[bool],
    choch_confirmed: Optional[bool],
    outcome: Optional[str],
    profit_loss: str,
    emotion: Optional[str],
    followed_rules: Optional[bool],
    mistakes: str,
    screenshots: tuple[str, ...],
) -> None:
    """Journal a trade.

    A checklist logged with "log anyway" marks this entry as a rule break
    and lists the failed conditions as mistakes.

    \b
    Examples:
      tradeflow log -p EU -t CT --bias Bullish -e 1.0850 -s 1.0800 \\
          --tp 1.1100 -o Win --pnl 250 --emotion Calm
    """
    from tradeflow.calculator import is_rr_below_target
    from tradeflow.journal import IncompleteEntryError, apply_pending_checklist
    from tradeflow.models import JournalEntryForm

    config = _get_config()
    repo = _get_repository(config)

    if auto_size and not lot_size:
        lot_size = _auto_lot_size(repo, config, pair, entry_price, stop_loss) or ""

    form = JournalEntryForm(
        pair=pair.upper() if pair else "",
        trade_type=trade_type or "",
        date=trade_date or datetime.now().date().isoformat(),
        time=trade_time,
        bias=bias or "",
        range_type=range_type or "",
        poi_type=poi_type or "",
        entry_price=entry_price,
        stop_loss=stop_loss,
        take_profit=take_profit,
        entry_type=entry_type or "",
        lot_size=lot_size,
        poi_tapped=poi_tapped,
        choch_confirmed=choch_confirmed,
        outcome=outcome or "",
        profit_loss=profit_loss,
        emotion=emotion or "",
        followed_rules=followed_rules,
        mistakes=mistakes,
        screenshots=list(screenshots),
    )

    missing = form.missing_fields()
    if missing:
        console.print(Panel(
            "[red]Missing required fields:[/red]\n" + "\n".join(f"  • {m}" for m in missing),
            title="[bold red]Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    pending = repo.take_pending_checklist()
    form = apply_pending_checklist(form, pending)

    try:
        trade = repo.add_entry(form)
    except IncompleteEntryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1)

    if pending is not None and pending.is_rule_break:
        console.print(Panel(
            "[yellow]This trade was taken against a failed checklist.[/yellow]\n"
            + "\n".join(f"  ✗ {item}" for item in pending.failed_items),
            title="[bold yellow]⚠ Rule Break[/bold yellow]",
            border_style="yellow",
        ))

    rr_text = f"{trade.rr_ratio}R" if trade.rr_ratio else "N/A"
    console.print(f"[green]✓[/green] Trade logged: {trade.pair} {trade.trade_type} "
                  f"[{_outcome_style(trade.outcome)}]{trade.outcome}[/{_outcome_style(trade.outcome)}] "
                  f"RR {rr_text} [dim](ID: {trade.id})[/dim]")

    if trade.rr_ratio and is_rr_below_target(trade.rr_ratio):
        console.print("[yellow]⚠ RR is below the 5R target.[/yellow]")


@click.command()
@click.option("--pair", "-p", type=str, default=None, help="Filter by pair key.")
@click.option("--type", "-t", "trade_type", type=click.Choice(TRADE_TYPES), default=None)
@click.option("--result", "-r", "outcome", type=click.Choice(OUTCOMES), default=None)
@click.option("--limit", "-n", type=int, default=20, help="Number of trades to show.")
def trades(
    pair: Optional[str],
    trade_type: Optional[str],
    outcome: Optional[str],
    limit: int,
) -> None:
    """Show the trade log, newest first.

    \b
    Examples:
      tradeflow trades
      tradeflow trades -p EU -r Loss
    """
    from tradeflow.analytics import compute_summary
    from tradeflow.journal import filter_trades

    repo = _get_repository(_get_config())
    all_trades = repo.load_trades(descending=True)
    shown = filter_trades(
        all_trades,
        pair=pair.upper() if pair else None,
        trade_type=trade_type,
        outcome=outcome,
    )

    if not shown:
        console.print("[dim]No trades found.[/dim]")
        return

    table = Table(title=f"Trades ({len(shown)})", show_header=True)
    table.add_column("Date", style="dim")
    table.add_column("Pair", style="cyan")
    table.add_column("Type")
    table.add_column("Bias")
    table.add_column("RR", justify="right")
    table.add_column("POI")
    table.add_column("ChoCH")
    table.add_column("Rules")
    table.add_column("Result")
    table.add_column("P&L", justify="right")
    table.add_column("Emotion")

    for trade in shown[:limit]:
        style = _outcome_style(trade.outcome)
        pnl_color = "green" if trade.pnl_value >= 0 else "red"
        table.add_row(
            trade.date,
            trade.pair,
            trade.trade_type,
            trade.bias,
            f"{trade.rr_ratio}R" if trade.rr_ratio else "—",
            _tri(trade.poi_tapped),
            _tri(trade.choch_confirmed),
            _tri(trade.followed_rules),
            f"[{style}]{trade.outcome}[/{style}]",
            f"[{pnl_color}]{trade.pnl_value:+,.2f}[/{pnl_color}]",
            trade.emotion,
        )

    console.print(table)

    summary = compute_summary(shown)
    pnl_color = "green" if summary.total_pnl >= 0 else "red"
    console.print(
        f"\n[bold]Stats:[/bold] {summary.total} trades | "
        f"Win rate {summary.win_rate:.1f}% | "
        f"Avg RR {summary.avg_rr:.2f} | "
        f"P&L [{pnl_color}]${summary.total_pnl:,.2f}[/{pnl_color}]"
    )
