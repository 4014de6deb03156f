"""Command-line interface for Azure Prod Ops."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .agent import Agent
from .api import AzureDevOpsClient
from .cli_builder import build_arg_parser
from .config import Config, get_config_dir, get_config_path
from .exceptions import ApiError, ConfigError, TerminalError
from .formatters import OutputFormatter
from .formatters.symbols import Symbols
from .ui.app import App

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_NAME = "apo.log"

CONFIGURE_HINT = "Run 'apo config' to configure your connection."


class CLI:
    """Command-line interface for Azure Prod Ops."""

    def __init__(self):
        self.parser = build_arg_parser()

    def run(self, argv: Optional[list[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code
        """
        args = self.parser.parse_args(argv)
        self._setup_logging(args)
        output = OutputFormatter(no_color=args.no_color, no_emoji=args.no_emoji)

        words = args.words
        if args.show_version:
            return self._print_version(output)

        command = words[0] if words else "ui"
        if command in ("ui", "tui"):
            return self._run_dashboard(output)
        if command == "config":
            return self._run_config(output)
        if command == "ask":
            if len(words) < 2:
                output.print_error("usage: apo ask <question>")
                return 1
            return self._run_ask(" ".join(words[1:]), output)
        if command == "help":
            self.parser.print_help()
            return 0
        if command == "version":
            return self._print_version(output)
        return self._run_ask(" ".join(words), output)

    def _setup_logging(self, args: argparse.Namespace) -> None:
        """Send log records to a file so they never draw over the dashboard."""
        if args.log_file:
            log_path = Path(args.log_file).expanduser()
        else:
            log_path = get_config_dir() / LOG_FILE_NAME
        level = logging.DEBUG if args.verbose else logging.WARNING
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            logging.getLogger().addHandler(logging.NullHandler())
            return
        logging.basicConfig(filename=str(log_path), level=level, format=LOG_FORMAT)

    def _print_version(self, output: OutputFormatter) -> int:
        output.print(f"apo v{__version__} - Azure Prod Ops CLI")
        return 0

    def _load_config(self, output: OutputFormatter) -> Optional[Config]:
        """Load and validate the config, printing the problem if there is one."""
        try:
            cfg = Config.load()
            cfg.validate_with_project()
        except ConfigError as e:
            output.print_error(str(e))
            output.print(CONFIGURE_HINT)
            return None
        return cfg

    # =========================================================================
    # Commands
    # =========================================================================

    def _run_dashboard(self, output: OutputFormatter) -> int:
        cfg = self._load_config(output)
        if cfg is None:
            return 1

        client = AzureDevOpsClient(cfg)
        app = App(cfg, client, symbols=output.symbols)
        try:
            app.run()
        except TerminalError as e:
            output.print_error(str(e))
            return 1
        return 0

    def _run_ask(self, query: str, output: OutputFormatter) -> int:
        cfg = self._load_config(output)
        if cfg is None:
            return 1

        agent = Agent(AzureDevOpsClient(cfg))
        result = agent.ask(query)
        output.print_result(result)
        return 0 if result.success else 1

    def _run_config(self, output: OutputFormatter) -> int:
        """Prompt for connection settings, save them, then test the connection."""
        try:
            cfg = Config.load()
        except ConfigError as e:
            output.print_warning(f"{e}; starting from defaults")
            cfg = Config()

        output.print("")
        output.print(f"{output.symbols.get(Symbols.Wrench)} Azure DevOps Configuration")
        output.print("─" * 40)

        try:
            organization = output.input(f"Organization [{cfg.organization}]: ").strip()
            project = output.input(f"Project [{cfg.project}]: ").strip()
            pat = output.input("Personal Access Token (PAT): ", password=True).strip()
        except (EOFError, KeyboardInterrupt):
            output.print("")
            output.print_error("configuration cancelled")
            return 1

        if organization:
            cfg.organization = organization
        if project:
            cfg.project = project
        if pat:
            cfg.pat = pat

        try:
            path = cfg.save(get_config_path())
        except OSError as e:
            output.print_error(f"saving config: {e}")
            return 1
        output.print_success(f"Configuration saved to {path}")

        try:
            cfg.validate()
        except ConfigError as e:
            output.print_error(str(e))
            return 1

        output.print("Testing connection...")
        try:
            projects = AzureDevOpsClient(cfg).list_projects()
        except ApiError as e:
            output.print_error(str(e))
            return 1
        output.print_success(f"Connected! Found {len(projects)} project(s).")
        output.print("Run 'apo' to launch the dashboard!")
        return 0


def main() -> int:
    """Main entry point."""
    cli = CLI()
    try:
        return cli.run()
    except Exception:
        logger.exception("apo crashed")
        raise


if __name__ == "__main__":
    sys.exit(main())
