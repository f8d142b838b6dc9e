"""Performance dashboard command for TradeFlow CLI."""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

_SPARK = "▁▂▃▄▅▆▇█"


def _sparkline(values: list[float]) -> str:
    if not values:
        return ""
    low, high = min(values), max(values)
    span = high - low
    if span == 0:
        return _SPARK[0] * len(values)
    return "".join(_SPARK[int((v - low) / span * (len(_SPARK) - 1))] for v in values)


def _money(value: float) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]${value:,.2f}[/{color}]"


def _group_table(title: str, label: str, groups) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column(label, style="cyan")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("P&L", justify="right")
    for group in groups:
        table.add_row(group.name, str(group.trades), f"{group.win_rate:.1f}%", _money(group.pnl))
    return table


@click.command()
def dashboard() -> None:
    """Show performance and discipline analytics.

    \b
    Examples:
      tradeflow dashboard
    """
    from tradeflow.analytics import (
        compute_summary,
        confirmation_breakdown,
        emotion_distribution,
        equity_curve,
        pair_performance,
        top_mistake,
        trade_type_performance,
    )
    from tradeflow.config import get_data_store, load_config
    from tradeflow.journal import TradeRepository

    repo = TradeRepository(get_data_store(load_config()))
    trades = repo.load_trades()

    if not trades:
        console.print(Panel(
            "[dim]No trades yet. Journal one with `tradeflow log`.[/dim]",
            title="[bold]Dashboard[/bold]",
            border_style="dim",
        ))
        return

    summary = compute_summary(trades)
    console.print(Panel(
        f"Trades:   [bold]{summary.total}[/bold] "
        f"([green]{summary.wins}W[/green] / [red]{summary.losses}L[/red] / "
        f"[yellow]{summary.break_evens}BE[/yellow])\n"
        f"Win Rate: [bold]{summary.win_rate:.1f}%[/bold]\n"
        f"Avg RR:   [bold]{summary.avg_rr:.2f}[/bold]\n"
        f"P&L:      {_money(summary.total_pnl)}\n\n"
        f"[bold]Discipline[/bold]\n"
        f"Rule Adherence: {summary.rule_adherence:.1f}% "
        f"({summary.rules_followed} followed, {summary.rules_broken} broken)\n"
        f"Win Rate Following Rules: {summary.followed_win_rate:.1f}%\n"
        f"Win Rate Breaking Rules:  {summary.broken_win_rate:.1f}%",
        title="[bold cyan]Performance[/bold cyan]",
        border_style="cyan",
    ))

    confirmation = Table(title="Entry Confirmation", show_header=True)
    confirmation.add_column("Confirmation", style="cyan")
    confirmation.add_column("Trades", justify="right")
    confirmation.add_column("Win Rate", justify="right")
    for bucket in confirmation_breakdown(trades):
        confirmation.add_row(bucket.name, str(bucket.trades), f"{bucket.win_rate:.1f}%")
    console.print(confirmation)

    console.print(_group_table("By Pair", "Pair", pair_performance(trades)))
    console.print(_group_table("By Trade Type", "Type", trade_type_performance(trades)))

    curve = equity_curve(trades)
    console.print(Panel(
        f"{_sparkline([point.equity for point in curve])}\n"
        f"[dim]{curve[0].date} → {curve[-1].date}[/dim]  Final: {_money(curve[-1].equity)}",
        title="[bold]Equity Curve[/bold]",
        border_style="blue",
    ))

    mistake = top_mistake(trades)
    if mistake:
        console.print(
            f"[bold]Top Mistake:[/bold] [red]{mistake.text}[/red] ({mistake.count}x)"
        )

    emotions = emotion_distribution(trades)
    if emotions:
        parts = [f"{name}: {count}" for name, count in emotions.items()]
        console.print(f"[bold]Emotions:[/bold] {' | '.join(parts)}")
