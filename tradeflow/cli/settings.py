"""Setup command for TradeFlow CLI."""

import click
from rich.console import Console

console = Console()


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create the configuration file and database.

    \b
    Examples:
      tradeflow init
      tradeflow init --force
    """
    from tradeflow.config import create_template_config, get_config_path, get_data_store, load_config

    path = get_config_path()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/yellow] {path}")
        console.print("[dim]Use --force to overwrite it.[/dim]")
    else:
        path = create_template_config(path)
        console.print(f"[green]✓[/green] Config written: {path}")

    store = get_data_store(load_config(path))
    console.print(f"[green]✓[/green] Database ready: {store.db_path}")
