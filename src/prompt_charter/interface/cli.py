"""Command-line interface — thin commands that delegate to the use cases."""

import asyncio
import logging
from contextlib import AbstractContextManager
from importlib import metadata
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from prompt_charter.domain.entities import InstallResult, RuleSetDescriptor
from prompt_charter.infrastructure.config import Settings, get_settings
from prompt_charter.interface import dependencies
from prompt_charter.interface.error_handlers import report_error
from prompt_charter.services.install_rules import InstallRulesUseCase
from prompt_charter.services.list_rules import ListRulesUseCase, group_by_domain

REPO_URL = "https://github.com/mpklu/prompt_charter"

console = Console()

app = typer.Typer(
    name="prompt-charter",
    help="CLI tool to install curated AI coding rule sets",
    add_completion=False,
    invoke_without_command=True,
)


class ConsoleProgress:
    """ProgressReporter that shows a Rich spinner."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def status(self, message: str) -> AbstractContextManager[Any]:
        return self._console.status(message, spinner="dots")


def show_banner() -> None:
    console.print(Text("\n🎯 Prompt Charter - AI Coding Rule Sets\n", style="bold cyan"))
    console.print("Install curated architectural rules to guide AI coding tools.\n")
    console.print("[bold]Available commands:[/bold]")
    console.print("  [cyan]install[/cyan]  - Interactively install a rule set")
    console.print("  [cyan]update[/cyan]   - Replace the installed rule set")
    console.print("  [cyan]list[/cyan]     - Show all available rule sets")
    console.print("  [cyan]--help[/cyan]   - Show help information\n")
    console.print("[dim]Example:[/dim] prompt-charter install\n")


def show_usage(result: InstallResult, rules_filename: str, install_dir_name: str) -> None:
    """Display where the rules went and how to point an AI assistant at them."""
    rel = f"{install_dir_name}/{rules_filename}"
    verb = "replaced" if result.replaced else "downloaded"

    console.print(f"\n[green]✅ Successfully {verb} {escape(rules_filename)}[/green]")
    console.print(f"[cyan]📍 Location:[/cyan] {escape(str(result.target))}")
    console.print(f"[dim]   ({result.line_count} lines, from {escape(result.source_path)})[/dim]")

    samples = (
        f"[yellow]1. Code Generation:[/yellow]\n"
        f'[dim]   "Load and obey all rules in {rel}.\n'
        f'   Task: Implement UserService with createUser() method."[/dim]\n\n'
        f"[yellow]2. Validation:[/yellow]\n"
        f'[dim]   "Load {rel}.\n'
        f'   Validate src/services/UserService.ts for rule compliance."[/dim]\n\n'
        f"[yellow]3. Refactoring:[/yellow]\n"
        f'[dim]   "Follow {rel} rules.\n'
        f'   Refactor ScheduleStore to use ScheduleService instead of direct API calls."[/dim]'
    )
    console.print()
    console.print(Panel(samples, title="[bold]📝 Sample Usage[/bold]", border_style="cyan"))

    console.print("\n[bold]📖 Learn More:[/bold]")
    console.print(f"[cyan]   Advanced patterns:[/cyan] {REPO_URL}/blob/main/templates/PROMPT_INJECTION.md")
    console.print(f"[cyan]   Validation guide:[/cyan] {REPO_URL}/blob/main/templates/VALIDATION_PROMPT.md")
    console.print(f"[cyan]   Full repository:[/cyan] {REPO_URL}\n")


def _mode_banner(title: str, local: bool) -> None:
    console.print(Text(f"\n{title}", style="bold cyan"))
    console.print("[dim](Local filesystem mode)[/dim]\n" if local else "[dim](GitHub remote)[/dim]\n")


# ── Commands ────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            version = metadata.version("prompt-charter")
        except metadata.PackageNotFoundError:
            version = "unknown"
        console.print(f"prompt-charter {version}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version", "-V", help="Show the version and exit", callback=_version_callback, is_eager=True
    ),
):
    """Show the command overview when no subcommand is provided."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if ctx.invoked_subcommand is None:
        show_banner()


@app.command()
def install(
    local: bool = typer.Option(False, "--local", "-l", help="Use local filesystem instead of GitHub (for development)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Root of the local rules checkout (with --local)", file_okay=False),
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project directory to install into", file_okay=False),
):
    """Interactively install a RULES.md file to your project."""
    _mode_banner("🎯 Prompt Charter - Rule Set Installer", local)
    _run_install(local=local, root=root, project=project, replace=False)


@app.command()
def update(
    local: bool = typer.Option(False, "--local", "-l", help="Use local filesystem instead of GitHub (for development)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Root of the local rules checkout (with --local)", file_okay=False),
    project: Path = typer.Option(Path("."), "--project", "-p", help="Project directory to update", file_okay=False),
):
    """Replace the installed RULES.md with a freshly selected rule set."""
    _mode_banner("🔄 Prompt Charter - Rule Set Update", local)
    _run_install(local=local, root=root, project=project, replace=True)


@app.command("list")
def list_rule_sets(
    local: bool = typer.Option(False, "--local", "-l", help="Use local filesystem instead of GitHub (for development)"),
    root: Optional[Path] = typer.Option(None, "--root", help="Root of the local rules checkout (with --local)", file_okay=False),
):
    """List all available rule sets."""
    _mode_banner("📋 Available Rule Sets", local)
    settings = get_settings()

    try:
        rule_sets = asyncio.run(_list(settings, local=local, root=root))
    except Exception as exc:
        raise typer.Exit(report_error(console, "Discovering rule sets", exc, local=local)) from None

    console.print(f"[green]✔[/green] Found {len(rule_sets)} rule set(s)")
    if not rule_sets:
        console.print("\n[yellow]No rule sets available yet. Check back soon![/yellow]")
        return

    console.print()
    for domain, subpaths in group_by_domain(rule_sets).items():
        console.print(f"[bold yellow]{escape(domain)}/[/bold yellow]")
        for subpath in subpaths:
            console.print(f"[dim]  └─[/dim] [cyan]{escape(subpath)}[/cyan]")
        console.print()

    console.print("[dim]To install a rule set, run:[/dim] [cyan]prompt-charter install[/cyan]\n")


# ── Runners ─────────────────────────────────────────────────────────────────


def _run_install(*, local: bool, root: Optional[Path], project: Path, replace: bool) -> None:
    settings = get_settings()
    operation = "Updating RULES.md" if replace else "Installing RULES.md"

    try:
        result = asyncio.run(
            _install(settings, local=local, root=root, project=project.resolve(), replace=replace)
        )
    except Exception as exc:
        raise typer.Exit(report_error(console, operation, exc, local=local)) from None

    show_usage(result, settings.rules_filename, settings.install_dir_name)


async def _install(
    settings: Settings,
    *,
    local: bool,
    root: Optional[Path],
    project: Path,
    replace: bool,
) -> InstallResult:
    async with dependencies.open_provider(settings, local=local, root=root) as provider:
        use_case = InstallRulesUseCase(
            provider,
            dependencies.build_prompt(console),
            project,
            progress=ConsoleProgress(console),
            domains_root=settings.domains_root,
            rules_filename=settings.rules_filename,
            install_dir_name=settings.install_dir_name,
        )
        return await use_case.execute(replace=replace)


async def _list(settings: Settings, *, local: bool, root: Optional[Path]) -> list[RuleSetDescriptor]:
    async with dependencies.open_provider(settings, local=local, root=root) as provider:
        use_case = ListRulesUseCase(
            provider,
            progress=ConsoleProgress(console),
            domains_root=settings.domains_root,
            rules_filename=settings.rules_filename,
        )
        return await use_case.execute()
