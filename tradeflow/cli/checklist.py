"""SOP checklist command for TradeFlow CLI.

Walks through the pre-trade checklist interactively. Answers are saved
after every prompt, so a checklist can be stopped and resumed.
"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

ANSWER_CHOICES = click.Choice(["y", "n", "s"], case_sensitive=False)


def _mark(checked) -> str:
    from tradeflow.models import TriState

    if checked is TriState.YES:
        return "[green]✓[/green]"
    if checked is TriState.NO:
        return "[red]✗[/red]"
    return "[dim]·[/dim]"


def _print_status(evaluator) -> None:
    for section in evaluator.sections:
        stats = evaluator.section_stats(section.id)
        color = "red" if stats["has_no"] else "green" if stats["all_yes"] else "white"
        console.print(
            f"\n[bold {color}]{section.title}[/bold {color}] "
            f"[dim]{stats['answered']}/{stats['total']}[/dim]"
        )
        for item in section.items:
            console.print(f"  {_mark(item.checked)} {item.label}")

    console.print(
        f"\nProgress: {evaluator.answered_count}/{evaluator.total_count} "
        f"({evaluator.progress:.0f}%)"
    )


def _print_history(store, limit: int = 10) -> None:
    from tradeflow.checklist import load_logs

    logs = load_logs(store)
    if not logs:
        console.print("[dim]No checklists logged yet.[/dim]")
        return

    table = Table(title="Checklist History", show_header=True)
    table.add_column("Date", style="dim")
    table.add_column("Result")
    table.add_column("Override")
    table.add_column("Failed Items")
    for entry in logs[:limit]:
        color = "green" if entry.result == "VALID" else "red"
        table.add_row(
            entry.date,
            f"[{color}]{entry.result}[/{color}]",
            "yes" if entry.is_override else "",
            "; ".join(entry.failed_items),
        )
    console.print(table)


@click.command()
@click.option("--reset", is_flag=True, default=False, help="Clear all answers and start over.")
@click.option("--status", is_flag=True, default=False, help="Show answers without prompting.")
@click.option("--history", is_flag=True, default=False, help="Show logged checklists.")
def checklist(reset: bool, status: bool, history: bool) -> None:
    """Run the pre-trade SOP checklist.

    Answer y (yes), n (no) or s (stop and save for later). Answers are
    final until the checklist is reset. A fully valid checklist can be
    executed; an answered but invalid one can only be logged anyway, which
    marks the next journaled trade as a rule break.

    \b
    Examples:
      tradeflow checklist
      tradeflow checklist --status
      tradeflow checklist --reset
    """
    from tradeflow.checklist import ChecklistEvaluator, record_execution
    from tradeflow.config import get_data_store, load_config
    from tradeflow.models import TriState

    store = get_data_store(load_config())

    if history:
        _print_history(store)
        return

    evaluator = ChecklistEvaluator.restore(store)

    if reset:
        evaluator.reset()
        evaluator.save_state(store)
        console.print("[green]✓[/green] Checklist reset")
        return

    if status:
        _print_status(evaluator)
        return

    for section in evaluator.sections:
        pending = [item for item in section.items if item.checked is TriState.UNANSWERED]
        if not pending:
            continue
        console.print(f"\n[bold cyan]{section.title}[/bold cyan]")
        for item in pending:
            reply = click.prompt(f"  {item.label}", type=ANSWER_CHOICES).lower()
            if reply == "s":
                evaluator.save_state(store)
                console.print(
                    f"[dim]Saved at {evaluator.answered_count}/{evaluator.total_count}.[/dim]"
                )
                return
            evaluator.answer(item.id, reply == "y")
            evaluator.save_state(store)
            if reply == "n":
                console.print("  [red]✗ Rule break[/red]")

    if evaluator.is_valid:
        console.print(Panel(
            "[green]All conditions met. Trade is VALID.[/green]",
            title="[bold green]✓ VALID[/bold green]",
            border_style="green",
        ))
        if click.confirm("Execute trade?", default=True):
            record_execution(store, evaluator)
            console.print("[green]✓[/green] Checklist logged. Journal the trade with `tradeflow log`.")
        return

    console.print(Panel(
        "[red]Trade is INVALID. Failed conditions:[/red]\n"
        + "\n".join(f"  ✗ {label}" for label in evaluator.failed_items),
        title="[bold red]✗ INVALID[/bold red]",
        border_style="red",
    ))
    if click.confirm("Log anyway as a rule break?", default=False):
        record_execution(store, evaluator, override=True)
        console.print(
            "[yellow]⚠ Logged as a rule break. The next journaled trade will be flagged.[/yellow]"
        )
