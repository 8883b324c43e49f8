"""CLI commands for commitcraft."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from commitcraft.config import EXPLORATORY, Config, is_first_run, load_config, save_config
from commitcraft.errors import CommitCraftError
from commitcraft.interaction import RichPrompter
from commitcraft.log_setup import setup_logging
from commitcraft.models import Action, CommitOptions, Provider
from commitcraft.providers import default_model
from commitcraft.wizard import SetupWizard
from commitcraft.workflow import RunResult, RunStatus, run_commit

app = typer.Typer(
    name="commitcraft",
    help="AI-generated commit messages for your pending changes",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _print_error(error: CommitCraftError) -> None:
    """Print an error with its remediation and exit."""
    err_console.print(f"[red]✗[/red] {escape(error.message)}")
    if error.hint:
        err_console.print(f"  [dim]{escape(error.hint)}[/dim]")
    raise typer.Exit(1)


def _print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def _print_info(message: str) -> None:
    console.print(f"[yellow]{message}[/yellow]")


def _report(result: RunResult, staged_only: bool) -> None:
    if result.status is RunStatus.NO_CHANGES:
        _print_info("No staged changes detected." if staged_only else "No changes detected.")
        raise typer.Exit(0)
    if result.status is RunStatus.NO_DIFF:
        _print_info("No diff found.")
        raise typer.Exit(0)
    if result.status is RunStatus.CANCELLED:
        _print_info("Commit cancelled.")
        raise typer.Exit(0)

    if result.status is RunStatus.COPIED:
        _print_success("Commit message copied to clipboard!")
        console.print(f"  [dim]{escape(result.detail)}[/dim]")
    elif result.status is RunStatus.COMMITTED:
        _print_success(f"Committed: {escape(result.commit.message)} ([cyan]{result.detail}[/cyan])")


@app.callback(invoke_without_command=True)
def generate(
    ctx: typer.Context,
    staged: bool = typer.Option(False, "--staged", "-s", help="Use staged changes only"),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Generate several suggestions and pick one"
    ),
    all_changes: bool = typer.Option(
        False, "--all", "-a", help="Stage all changes before generating"
    ),
    quick: bool = typer.Option(
        False, "--quick", "-q", help="Stage everything and commit with a fast model, no questions"
    ),
    provider: Optional[Provider] = typer.Option(
        None, "--provider", "-p", case_sensitive=False, help="Provider for this run only"
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model for this run only"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Generate a commit message from the pending changes of this repository."""
    setup_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    options = CommitOptions(
        staged=staged,
        interactive=interactive,
        auto_stage=all_changes,
        quick=quick,
        provider=provider,
        model=model,
    )

    def first_run_setup(current: Config) -> Config:
        console.print("[bold]Welcome! Let's set up your preferences.[/bold]")
        return SetupWizard(console).run(current)

    try:
        result = run_commit(
            options,
            prompter=RichPrompter(console),
            setup=first_run_setup,
            progress=lambda text: console.status(f"[cyan]{text}[/cyan]", spinner="dots"),
        )
    except CommitCraftError as e:
        _print_error(e)
        return

    _report(result, staged_only=options.staged or options.auto_stage)


def _style_name(config: Config) -> str:
    return config.style.value if config.style is not None else EXPLORATORY


def _print_config(config: Config) -> None:
    table = Table(title="⚙ Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    api_key = config.api_key
    if not api_key:
        masked = "- (from environment)"
    elif len(api_key) > 8:
        masked = f"{api_key[:4]}…{api_key[-4:]}"
    else:
        masked = "****"
    rows = [
        ("provider", config.provider.value),
        ("model", config.model or f"{default_model(config.provider)} (default)"),
        ("api_key", masked),
        ("style", _style_name(config)),
        ("action", config.action.value),
        ("clip_format", config.clip_format.value),
        ("timeout", f"{config.timeout:g}s"),
        ("max_length", str(config.max_length)),
    ]
    if config.provider is Provider.OLLAMA:
        rows.append(("server", f"{config.host}:{config.port}"))
    for key, value in rows:
        table.add_row(key, value)

    console.print(table)
    where = Config.get_config_path()
    console.print(f"[dim]{where}{'' if where.exists() else ' (not created yet)'}[/dim]")


@app.command("config")
def configure(
    show: bool = typer.Option(False, "--show", help="Print the current configuration"),
    style: bool = typer.Option(False, "--style", help="Change the commit message style only"),
    action: bool = typer.Option(False, "--action", help="Change the post-generation action only"),
    clip_format: bool = typer.Option(False, "--clip-format", help="Change the clipboard format only"),
) -> None:
    """Set up provider, model and preferences."""
    config = load_config()
    if show:
        _print_config(config)
        return

    wizard = SetupWizard(console)
    if style:
        config = config.model_copy(update={"style": wizard.ask_style(config.style)})
        saved = f"Style saved: {_style_name(config)}"
    elif action:
        update: dict[str, object] = {"action": wizard.ask_action(config.action)}
        if update["action"] is Action.CLIPBOARD:
            update["clip_format"] = wizard.ask_clip_format(config.clip_format)
        config = config.model_copy(update=update)
        saved = f"Action saved: {config.action.value}"
    elif clip_format:
        config = config.model_copy(update={"clip_format": wizard.ask_clip_format(config.clip_format)})
        saved = f"Clipboard format saved: {config.clip_format.value}"
    else:
        if is_first_run():
            console.print("[bold]Welcome! Let's set up your preferences.[/bold]")
        config = wizard.run(config)
        saved = f"Setup complete! (provider: {config.provider.value}, action: {config.action.value})"

    try:
        path = save_config(config)
    except CommitCraftError as e:
        _print_error(e)
        return
    _print_success(saved)
    console.print(f"[dim]{path}[/dim]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
