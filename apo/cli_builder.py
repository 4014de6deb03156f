"""Factory for constructing the CLI argument parser."""

import argparse

EPILOG = """\
commands:
  apo                   Launch the dashboard (default)
  apo ui | tui          Launch the dashboard
  apo ask <question>    Ask a natural language question
  apo <question>        Ask a natural language question (shortcut)
  apo config            Configure the Azure DevOps connection
  apo help              Show this help
  apo version           Show version

dashboard keys:
  [1-5]       Switch between tabs
  [/]         Open Copilot mode
  [↑↓/jk]     Navigate items
  [g/G]       Go to top/bottom
  [Enter]     Open detail view
  [f]         Filter current list
  [Tab]       Cycle tabs
  [r]         Refresh data
  [Esc]       Back / Cancel
  [q]         Quit

examples:
  apo "what work items are assigned to me?"
  apo "show failed builds"
  apo ask "list all pipelines"

configuration:
  Config file: ~/.config/apo/config.json (override with APO_CONFIG)
  Environment variables override the file:
    AZURE_DEVOPS_ORG, AZURE_DEVOPS_PROJECT, AZURE_DEVOPS_PAT,
    AZURE_DEVOPS_URL, AZURE_DEVOPS_API_VERSION
"""


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="apo",
        description="Azure Prod Ops - terminal dashboard for Azure DevOps",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "words",
        nargs="*",
        metavar="command",
        help="Command (ui, ask, config, help, version) or a question to ask",
    )

    parser.add_argument(
        "--log-file",
        dest="log_file",
        type=str,
        help="Write the log to this file (default: apo.log next to the config file)",
    )

    parser.add_argument(
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Log debug messages, including every API request",
    )

    parser.add_argument(
        "--no-color",
        dest="no_color",
        action="store_true",
        help="Disable colored output for the non-interactive commands",
    )

    parser.add_argument(
        "--no-emoji",
        dest="no_emoji",
        action="store_true",
        help="Use ASCII icons instead of emoji",
    )

    parser.add_argument(
        "-V",
        "--version",
        dest="show_version",
        action="store_true",
        help="Show version and exit",
    )

    return parser
