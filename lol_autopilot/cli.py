"""
Command line interface

``watch`` runs auto-accept and auto pick/ban until Ctrl-C; ``login`` runs one
Riot Client login and exits with 0 on success, 1 on failure.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt

from . import __version__
from .config import AutomationConfig
from .exceptions import AutomationError
from .models.automation import StatusEvent, StatusKind
from .services import AutomationService
from .services.desktop import PsutilProcessInspector, PyAutoGuiKeyboard, PyAutoGuiScreenMatcher, PyGetWindowLocator
from .services.summoner_service import DecayInfo

KIND_STYLES = {
    StatusKind.INFO: "blue",
    StatusKind.SUCCESS: "green",
    StatusKind.ERROR: "red",
}


def setup_logging(verbose: bool = False, console: Optional[Console] = None):
    """Route every logger through rich"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True
    )
    # request lines would drown the status output
    logging.getLogger("httpx").setLevel(logging.WARNING)


class CLIHandler:
    """CLI Handler Class"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.automation_service: Optional[AutomationService] = None

    def create_argument_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="League of Legends client automation",
            prog="lol-autopilot",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Enable verbose logging output"
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        watch = subparsers.add_parser("watch", help="Auto-accept matches and pick/ban champions")
        watch.add_argument(
            "--client-path",
            type=str,
            required=True,
            help="Path to RiotClientServices.exe"
        )
        watch.add_argument(
            "--auto-accept",
            action="store_true",
            help="Accept ready-checks automatically"
        )
        watch.add_argument(
            "--pick",
            type=int,
            default=None,
            metavar="ID",
            help="Champion id to pick and lock"
        )
        watch.add_argument(
            "--ban",
            type=int,
            default=None,
            metavar="ID",
            help="Champion id to ban"
        )

        login = subparsers.add_parser("login", help="Launch the Riot Client and log an account in")
        login.add_argument(
            "--account-id",
            type=str,
            required=True,
            help="Identifier reported in status events"
        )
        login.add_argument(
            "--username",
            type=str,
            required=True,
            help="Riot account username"
        )
        login.add_argument(
            "--password",
            type=str,
            default=None,
            help="Riot account password (prompted when omitted)"
        )
        login.add_argument(
            "--client-path",
            type=str,
            required=True,
            help="Path to RiotClientServices.exe"
        )
        login.add_argument(
            "--strict-focus",
            action="store_true",
            help="Fail when the login window cannot be confirmed in the foreground"
        )
        login.add_argument(
            "--no-visual-check",
            action="store_true",
            help="Skip the on-screen check of the username field"
        )

        return parser

    def build_config(self, args: argparse.Namespace) -> AutomationConfig:
        return AutomationConfig(
            strict_focus=getattr(args, "strict_focus", False),
            visual_check=not getattr(args, "no_visual_check", False)
        )

    def create_service(self, config: AutomationConfig) -> AutomationService:
        """Automation service wired to the real desktop"""
        service = AutomationService(
            PsutilProcessInspector(),
            PyGetWindowLocator(),
            PyAutoGuiKeyboard(key_delay=config.login.key_delay),
            PyAutoGuiScreenMatcher(),
            config=config
        )
        service.set_callbacks(on_status=self.on_status, on_decay_update=self.on_decay_update)
        return service

    def on_status(self, event: StatusEvent):
        style = KIND_STYLES[event.kind]
        self.console.print(f"[{style}]{event.step}[/{style}] {event.message}")

    def on_decay_update(self, info: DecayInfo):
        name = info.summoner.game_name if info.summoner else "?"
        self.console.print(
            f"[cyan]account[/cyan] {name}: solo decay {info.solo_decay_days} days, "
            f"flex decay {info.flex_decay_days} days"
        )

    async def watch(self, args: argparse.Namespace) -> int:
        service = self.create_service(self.build_config(args))
        self.automation_service = service

        service.set_client_path(args.client_path)
        service.set_auto_accept_enabled(args.auto_accept)
        service.set_pick_ban_settings(bool(args.pick or args.ban), args.pick, args.ban)

        settings = service.get_pick_ban_settings()
        self.console.print(Panel(
            f"Client: {args.client_path}\n"
            f"Auto-accept: {'on' if service.get_auto_accept_enabled() else 'off'}\n"
            f"Pick: {settings.pick_champion_id or '-'}   Ban: {settings.ban_champion_id or '-'}",
            title="Watching the League client",
            border_style="blue"
        ))

        service.start()
        try:
            await asyncio.Event().wait()
        finally:
            await service.aclose()
        return 0

    async def login(self, args: argparse.Namespace) -> int:
        password = args.password
        if password is None:
            password = Prompt.ask("Password", password=True, console=self.console)

        service = self.create_service(self.build_config(args))
        self.automation_service = service
        try:
            await service.login(args.account_id, args.username, password, client_path=args.client_path)
        except AutomationError:
            # already reported through the status callback
            return 1
        finally:
            await service.aclose()
        return 0

    async def run(self, args: argparse.Namespace) -> int:
        if args.command == "watch":
            return await self.watch(args)
        return await self.login(args)


def main(argv: Optional[List[str]] = None):
    """CLI main entry point"""
    cli_handler = CLIHandler()
    parser = cli_handler.create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, cli_handler.console)

    try:
        exit_code = asyncio.run(cli_handler.run(args))
    except KeyboardInterrupt:
        cli_handler.console.print("\n[yellow]Operation cancelled by user[/yellow]")
        exit_code = 0 if args.command == "watch" else 1
    except Exception as e:
        cli_handler.console.print(f"[red]Unexpected error: {e}[/red]")
        logging.getLogger(__name__).debug("Unexpected error", exc_info=True)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
