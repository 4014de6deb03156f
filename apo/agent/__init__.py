"""Natural-language query interpretation."""

from .agent import Agent, AgentResult, Intent, format_result_lines

__all__ = ["Agent", "AgentResult", "Intent", "format_result_lines"]
