"""CLI commands for TradeFlow.

This package provides the command-line interface for TradeFlow:
position sizing, the SOP checklist, trade journaling, and analytics.
"""

from tradeflow.cli.main import cli, main

__all__ = ["cli", "main"]
