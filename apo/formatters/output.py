"""Output formatter for the non-interactive commands.

Wraps a Rich console so `apo ask`, `apo config` and the error paths of the CLI
print styled text with the same icons the dashboard uses.

Usage:
    output = OutputFormatter(no_color=False)
    output.print_result(agent.ask("show failed builds"))
    output.print_error("organization is required")
"""

from typing import TYPE_CHECKING, Union

from rich.console import Console
from rich.text import Text

from .symbols import Symbols, SymbolsFormatter

if TYPE_CHECKING:
    from ..agent import AgentResult


class OutputFormatter:
    """Central formatter that owns the Rich console and the symbols.

    Attributes:
        console: The Rich console for output
        symbols: SymbolsFormatter for emoji/ASCII symbols
    """

    def __init__(self, no_color: bool = False, no_emoji: bool = False):
        """Initialize the output formatter.

        Args:
            no_color: If True, disable all colors and styling in output
            no_emoji: If True, always use ASCII symbols
        """
        self._no_color = no_color
        self._console = Console(
            no_color=no_color,
            force_terminal=None,
            highlight=False,
        )
        self._err_console = Console(
            no_color=no_color,
            force_terminal=None,
            highlight=False,
            stderr=True,
        )
        self._symbols = SymbolsFormatter(no_emoji=no_emoji)

    @property
    def console(self) -> Console:
        """Get the underlying Rich console."""
        return self._console

    @property
    def symbols(self) -> SymbolsFormatter:
        return self._symbols

    @property
    def no_color(self) -> bool:
        """Check if colors are disabled."""
        return self._no_color

    def print(self, message: Union[str, Text]) -> None:
        """Print message using Rich console.

        Args:
            message: Message to print (string or Rich Text)
        """
        self._console.print(message, highlight=False)

    def input(self, prompt: str, password: bool = False) -> str:
        """Read one line from the user, hiding it when `password` is set."""
        return self._console.input(Text(prompt, style="bold"), password=password)

    def print_success(self, message: str) -> None:
        line = Text()
        line.append(f"{self._symbols.get(Symbols.Succeeded)} ", style="green")
        line.append(message)
        self._console.print(line, highlight=False)

    def print_warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        line = Text()
        line.append("Warning: ", style="bold yellow")
        line.append(message)
        self._err_console.print(line, highlight=False)

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        line = Text()
        line.append(f"{self._symbols.get(Symbols.Failed)} ", style="red")
        line.append("Error: ", style="bold red")
        line.append(message)
        self._err_console.print(line, highlight=False)

    def print_result(self, result: "AgentResult") -> None:
        """Print an agent answer: message, data lines, then dim suggestions."""
        from ..agent import format_result_lines

        self._console.print(
            Text(result.message, style="" if result.success else "red"), highlight=False
        )
        if result.data:
            for line in format_result_lines(result.data, self._symbols):
                self._console.print(Text(line), highlight=False)
        for suggestion in result.suggestions:
            self._console.print(
                Text(f"{self._symbols.get(Symbols.Bulb)} {suggestion}", style="dim"),
                highlight=False,
            )
