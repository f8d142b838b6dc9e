"""Position sizing commands for TradeFlow CLI.

Handles the lot size calculator and the saved account balance.
"""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

console = Console()


def _get_config():
    """Lazily load configuration."""
    from tradeflow.config import load_config

    return load_config()


def _get_data_store(config: Optional[dict] = None):
    """Get the data store instance."""
    from tradeflow.config import get_data_store

    return get_data_store(config)


def get_saved_balance(store, config: Optional[dict] = None) -> Optional[str]:
    """Saved balance preference, falling back to the configured balance."""
    from tradeflow.config import get_account_settings
    from tradeflow.db.store import ACCOUNT_BALANCE

    saved = store.get_value(ACCOUNT_BALANCE)
    if saved:
        return saved
    configured = get_account_settings(config)["balance"]
    return str(configured) if configured else None


def _print_error(message: str) -> None:
    console.print(Panel(
        f"[red]{message}[/red]",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))


@click.command()
@click.option(
    "-b", "--balance",
    "account_balance",
    type=str,
    default=None,
    help="Account balance. Defaults to the saved balance.",
)
@click.option(
    "-r", "--risk",
    "risk_percent",
    type=str,
    default=None,
    help="Percent of the balance to risk. Defaults to the configured risk.",
)
@click.option("-e", "--entry", "entry_price", type=str, default=None, help="Entry price.")
@click.option("-s", "--sl", "stop_loss", type=str, default=None, help="Stop-loss price.")
@click.option(
    "-p", "--pair",
    type=str,
    default=None,
    help="Pair symbol or journal key (EURUSD, EU, UJ, ...).",
)
@click.option(
    "--save-balance",
    is_flag=True,
    default=False,
    help="Remember the balance for next time.",
)
def calc(
    account_balance: Optional[str],
    risk_percent: Optional[str],
    entry_price: Optional[str],
    stop_loss: Optional[str],
    pair: Optional[str],
    save_balance: bool,
) -> None:
    """Calculate the lot size for a planned trade.

    Lot size = risk amount / (pip distance x pip value per lot).

    \b
    Examples:
      tradeflow calc -b 10000 -r 1 -e 1.0850 -s 1.0800
      tradeflow calc -e 155.20 -s 154.70 -p UJ
    """
    from tradeflow.calculator import PositionSizeError, calculate_position_size, is_high_risk
    from tradeflow.config import get_account_settings
    from tradeflow.db.store import ACCOUNT_BALANCE
    from tradeflow.pairs import get_pair

    config = _get_config()
    settings = get_account_settings(config)
    store = _get_data_store(config)

    if account_balance is None:
        account_balance = get_saved_balance(store, config)
    if risk_percent is None:
        risk_percent = str(settings["risk_percent"])

    forex_pair = get_pair(pair or settings["default_pair"])
    if forex_pair is None:
        _print_error(f"Unknown pair: {pair}")
        raise SystemExit(1)

    try:
        result = calculate_position_size(
            account_balance, risk_percent, entry_price, stop_loss, forex_pair
        )
    except PositionSizeError as e:
        _print_error(str(e))
        raise SystemExit(1)

    if result is None:
        console.print(Panel(
            "[dim]Enter balance, risk %, entry and stop loss to calculate a lot size.[/dim]",
            title="[bold]Position Size[/bold]",
            border_style="dim",
        ))
        return

    if save_balance:
        store.set_value(ACCOUNT_BALANCE, str(account_balance))

    direction_color = "green" if result.direction == "LONG" else "red"
    text = (
        f"[bold]{result.pair_label}[/bold] "
        f"[{direction_color}]{result.direction}[/{direction_color}]\n\n"
        f"Risk Amount:  [yellow]${result.risk_amount:,.2f}[/yellow]\n"
        f"Stop Distance: {result.pip_count:.1f} pips\n"
        f"{'─' * 30}\n"
        f"[bold]Lot Size:     [green]{result.lot_size:.2f}[/green][/bold]\n\n"
        f"[dim]Pip step {result.pip_step} | "
        f"Pip value ${result.pip_value_per_lot}/lot[/dim]"
    )
    if result.small_pip_warning:
        text += "\n\n[yellow]⚠ Stop is less than 1 pip away, lot size is unrealistic.[/yellow]"
    if is_high_risk(risk_percent):
        text += f"\n[yellow]⚠ Risking {risk_percent}% is above the 2% limit.[/yellow]"

    console.print(Panel(
        text,
        title="[bold cyan]Position Size[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("amount", required=False)
def balance(amount: Optional[str]) -> None:
    """Show or set the saved account balance.

    \b
    Examples:
      tradeflow balance          # Show saved balance
      tradeflow balance 10000    # Save a new balance
    """
    from tradeflow.db.store import ACCOUNT_BALANCE
    from tradeflow.models import parse_number

    config = _get_config()
    store = _get_data_store(config)

    if amount is None:
        saved = get_saved_balance(store, config)
        if saved is None:
            console.print("[dim]No account balance saved.[/dim]")
        else:
            console.print(f"[bold]Account Balance:[/bold] ${parse_number(saved) or 0:,.2f}")
        return

    value = parse_number(amount)
    if value is None or value <= 0:
        _print_error("Balance must be a positive number.")
        raise SystemExit(1)

    store.set_value(ACCOUNT_BALANCE, amount)
    console.print(f"[green]✓[/green] Account balance saved: ${value:,.2f}")
