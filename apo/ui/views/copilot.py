"""Copilot: ask questions in plain language from inside the dashboard."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from ...agent import Agent, format_result_lines
from ...formatters.symbols import Symbols
from ..components import TextInput
from ..style import Colors, style, truncate
from ..terminal import Key, KeyType
from .base import View, ViewContext, ViewId

PROMPT = "apo> "


class MessageKind(Enum):
    QUESTION = auto()
    ANSWER = auto()
    ERROR = auto()
    SUGGESTION = auto()


@dataclass
class CopilotMessage:
    """One line of the conversation history."""
    kind: MessageKind
    content: str
    time: datetime = field(default_factory=datetime.now)


class CopilotView(View):
    """Conversation history above a single-line question input."""

    view_id = ViewId.COPILOT
    title = "Copilot"

    def __init__(self, context: ViewContext, agent: Agent):
        super().__init__(context)
        self.agent = agent
        self.input = TextInput(context.terminal, PROMPT)
        self.history: list[CopilotMessage] = []

    def on_enter(self) -> None:
        self.input.activate()
        self.terminal.show_cursor()

    def on_exit(self) -> None:
        self.input.deactivate()
        self.terminal.hide_cursor()

    def handle_key(self, key: Key) -> bool:
        if key.type == KeyType.ENTER:
            self.submit()
            return True
        if key.type == KeyType.BACKSPACE:
            self.input.backspace()
            return True
        if key.type == KeyType.CHAR and key.char.isprintable():
            self.input.insert_char(key.char)
            return True
        return False

    def submit(self) -> None:
        """Send the input to the agent and append question and answer to the history."""
        query = self.input.value.strip()
        if not query:
            return
        self.input.clear()
        self.history.append(CopilotMessage(MessageKind.QUESTION, query))

        result = self.agent.ask(query)
        kind = MessageKind.ANSWER if result.success else MessageKind.ERROR
        self.history.append(CopilotMessage(kind, result.message))

        bulb = self.context.symbols.get(Symbols.Bulb)
        for suggestion in result.suggestions:
            self.history.append(CopilotMessage(MessageKind.SUGGESTION, f"{bulb} {suggestion}"))

        if result.data:
            for line in format_result_lines(result.data, self.context.symbols):
                self.history.append(CopilotMessage(MessageKind.ANSWER, line))

    def render(self, start_row: int, width: int, height: int) -> None:
        term = self.terminal
        robot = self.context.symbols.get(Symbols.Robot)

        term.move_cursor(start_row, 2)
        term.write(style(f"{robot} Copilot - Ask me about Azure DevOps", Colors.BOLD, Colors.CYAN))
        term.move_cursor(start_row + 1, 2)
        term.write(style("─" * max(0, width - 4), Colors.DIM))

        if not self.history:
            term.move_cursor(start_row + 3, 2)
            term.write(style('Try: "What work items are assigned to me?"', Colors.DIM))
        else:
            # Newest messages stay visible above the input
            max_lines = max(0, height - 6)
            row = start_row + 2
            for message in self.history[-max_lines:] if max_lines else []:
                term.move_cursor(row, 2)
                if message.kind == MessageKind.QUESTION:
                    term.write(style(
                        f"> {truncate(message.content, width - 6)}", Colors.CYAN, Colors.BOLD
                    ))
                elif message.kind == MessageKind.ERROR:
                    term.write(style(truncate(message.content, width - 4), Colors.RED))
                elif message.kind == MessageKind.SUGGESTION:
                    term.write(style(f"  {truncate(message.content, width - 6)}", Colors.DIM))
                else:
                    term.write(style(truncate(message.content, width - 4), Colors.GREEN))
                row += 1

        self.input.render(start_row + height - 2, 2, width - 4)
