from __future__ import annotations

import functools
import logging
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import click  # type: ignore[import]
from rich.console import Console  # type: ignore[import]
from rich.logging import RichHandler  # type: ignore[import]

from pash import __version__
from pash.config import CONFIG_FILE, Settings, write_config
from pash.errors import MissingDependencyError, PashError
from pash.models import ChangeScope
from pash.rules import LOCAL_RULES_DIR, RuleLoader, add_rule, init_rules, list_rules, parse_rule_paths

logger = logging.getLogger(__name__)

CUSTOM_RULES_ENV = "PASH_CUSTOM_RULES"
VERSION_MESSAGE = "PASH Code Review Framework v%(version)s\nAI-powered pre-push code review tool"
CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@dataclass(slots=True)
class CliState:
    config_file: Path
    rules: Optional[str] = None
    no_input: bool = False


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("pash")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except PashError as exc:
            logger.debug("Command failed", exc_info=exc)
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _stdin_is_interactive() -> bool:
    return sys.stdin.isatty()


def _prompt_for_rules(console: Console) -> Tuple[Optional[List[str]], bool]:
    console.print("")
    if not click.confirm("Would you like to use custom review rules?", default=False):
        console.print("Using default review prompts.")
        return None, False

    answer = click.prompt(
        "Enter rule file paths (comma-separated, or press Enter for default)",
        default="",
        show_default=False,
    )
    paths = parse_rule_paths(answer)
    if paths:
        console.print(f"Using custom rules: {','.join(paths)}", markup=False)
        return paths, True

    discovered = RuleLoader().discover()
    if discovered:
        console.print("Using local repository rules as default:")
        for path in discovered:
            console.print(f"  - {path.name}", markup=False)
    else:
        console.print("No local rules found. Using default review prompts.")
    return None, True


def _select_rules(rules_option: Optional[str], no_input: bool, console: Console) -> Tuple[Optional[List[str]], bool]:
    """
    Decide which rule files a review uses.

    Returns the explicit rule paths (None means the local rules directory)
    and whether rules should be used at all.
    """
    if rules_option:
        return parse_rule_paths(rules_option), True

    env_value = os.environ.get(CUSTOM_RULES_ENV)
    if env_value:
        return parse_rule_paths(env_value), True

    if no_input or not _stdin_is_interactive():
        return None, True

    return _prompt_for_rules(console)


def _build_service(repository: Any, settings: Settings, console: Console) -> Any:
    from pash.services import ReviewService

    return ReviewService(repository, settings, console=console)


def _run_review(state: CliState, scope: ChangeScope, rules_option: Optional[str], no_input: bool) -> None:
    if shutil.which("git") is None:
        raise MissingDependencyError("Git is not installed. Please install Git to use this script.")

    # GitPython refuses to import when no git executable can be found.
    from pash.change_ingest import GitRepository

    repository = GitRepository(Path.cwd())
    repository.verify_repository()
    settings = Settings.load(state.config_file)

    console = Console(highlight=False, soft_wrap=True)
    console.print(f"Reviewing '{scope.value}' changes...", markup=False)

    rule_paths, use_rules = _select_rules(rules_option or state.rules, no_input or state.no_input, console)
    if rule_paths:
        console.print(f"Custom rules: {','.join(rule_paths)}", markup=False)

    service = _build_service(repository, settings, console)
    service.review(scope, rule_paths=rule_paths, use_rules=use_rules)


def _review_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--no-input",
        is_flag=True,
        help="Never prompt for custom rules.",
    )(func)
    func = click.option(
        "--rules",
        "rules_option",
        default=None,
        metavar="FILES",
        help="Use custom rule files (comma-separated).",
    )(func)
    return func


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "-v", "--version", prog_name="pash", message=VERSION_MESSAGE)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_FILE,
    envvar="PASH_CONFIG",
    show_default=True,
    help="Path to the PASH configuration file.",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
@_review_options
@click.pass_context
def cli(ctx: click.Context, config_file: Path, verbose: bool, rules_option: Optional[str], no_input: bool) -> None:
    """PASH - AI-Powered Pre-Push Code Review.

    Without a command, reviews all local changes (staged, unstaged and untracked).
    """
    _configure_logging(verbose)
    ctx.obj = CliState(config_file=config_file, rules=rules_option, no_input=no_input)

    if ctx.invoked_subcommand is None:
        _handle_errors(_run_review)(ctx.obj, ChangeScope.ALL, None, False)


@cli.command("staged")
@_review_options
@click.pass_obj
@_handle_errors
def review_staged(state: CliState, rules_option: Optional[str], no_input: bool) -> None:
    """Review staged changes."""
    _run_review(state, ChangeScope.STAGED, rules_option, no_input)


@cli.command("unstaged")
@_review_options
@click.pass_obj
@_handle_errors
def review_unstaged(state: CliState, rules_option: Optional[str], no_input: bool) -> None:
    """Review unstaged changes."""
    _run_review(state, ChangeScope.UNSTAGED, rules_option, no_input)


@cli.command("untracked")
@_review_options
@click.pass_obj
@_handle_errors
def review_untracked(state: CliState, rules_option: Optional[str], no_input: bool) -> None:
    """Review untracked files."""
    _run_review(state, ChangeScope.UNTRACKED, rules_option, no_input)


@cli.command("all")
@_review_options
@click.pass_obj
@_handle_errors
def review_all(state: CliState, rules_option: Optional[str], no_input: bool) -> None:
    """Review all changes (default)."""
    _run_review(state, ChangeScope.ALL, rules_option, no_input)


@cli.command("init")
@click.pass_obj
@_handle_errors
def init_command(state: CliState) -> None:
    """Initialize PASH with LiteLLM configuration."""
    console = Console(highlight=False, soft_wrap=True)
    console.print("Initializing PASH Code Review Framework for LiteLLM...")

    api_url = click.prompt("Enter your LiteLLM API URL (e.g., http://localhost:4000)")
    api_key = click.prompt("Enter your LiteLLM API Key", hide_input=True)
    model = click.prompt("Enter the model name to use (e.g., gpt-4, claude-3-opus)")

    path = write_config(state.config_file, api_url=api_url, api_key=api_key, model=model)
    console.print(f"Configuration saved to {path}.", markup=False)
    console.print("Initialization complete. You can now run 'pash' to review your code.")


@cli.command("init-rules")
@_handle_errors
def init_rules_command() -> None:
    """Create default review rules for this repository."""
    console = Console(highlight=False, soft_wrap=True)
    console.print("Initializing local PASH rules for this repository...")
    rules_dir = init_rules(Path.cwd())
    console.print(f"Local PASH rules initialized in {rules_dir.relative_to(Path.cwd())}", markup=False)
    console.print("You can customize the rules by editing the markdown files in that directory.")


@cli.command("list-rules")
def list_rules_command() -> None:
    """List available review rules in this repository."""
    console = Console(highlight=False, soft_wrap=True)
    console.print("Available review rules in this repository:")
    names = list_rules(Path.cwd())
    if names is None:
        console.print("No local rules found. Run 'pash init-rules' to create default rules.")
        return
    if not names:
        console.print(f"  No rule files found in {LOCAL_RULES_DIR}", markup=False)
        return
    for name in names:
        console.print(f"  - {name}", markup=False)


@cli.command("add-rule")
@click.argument("name", required=False)
@_handle_errors
def add_rule_command(name: Optional[str]) -> None:
    """Add a new custom review rule."""
    console = Console(highlight=False, soft_wrap=True)
    rule_file = add_rule(Path.cwd(), name)
    console.print(f"Created new rule file: {rule_file.relative_to(Path.cwd())}", markup=False)
    console.print("Edit this file to add your custom review rules.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point; every failure exits with status 1."""
    try:
        rv = cli.main(args=list(argv) if argv is not None else None, prog_name="pash", standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except click.ClickException as exc:
        exc.show()
        sys.exit(1)
    sys.exit(rv if isinstance(rv, int) else 0)


if __name__ == "__main__":
    main()
