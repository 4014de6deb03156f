"""Formatting helpers shared by the dashboard and the CLI."""

from .output import OutputFormatter
from .symbols import Symbol, Symbols, SymbolsFormatter

__all__ = ["OutputFormatter", "Symbol", "Symbols", "SymbolsFormatter"]
