"""authforge CLI: bootstrap a Flutter app with Firebase Authentication."""

import logging
import tomllib
from pathlib import Path

import typer
from pydantic import ValidationError

from authforge import __version__

from .config import BootstrapConfig, load_config, write_config_template
from .constants import CONFIG_ENV_VAR
from .core import Sequencer, StepContext, build_steps
from .errors import UsageError
from .logging import configure_logging
from .models import ProjectContext, RunLog, StepState, ToolStatus, validate_project_name
from .output import OutputContext, get_output_context, set_output_context
from .services import build_requirements, probe, requirements_met

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"authforge {__version__}")
        raise typer.Exit()


def _write_config_callback(value: Path | None) -> None:
    """Write a default config file and exit."""
    if value is not None:
        path = write_config_template(value)
        typer.echo(f"Wrote config template: {path}")
        raise typer.Exit()


def _validate_name(value: str) -> str:
    try:
        return validate_project_name(value)
    except UsageError as e:
        raise typer.BadParameter(str(e)) from None


app = typer.Typer(
    name="authforge",
    help="Bootstrap a Flutter project with Firebase Authentication",
    add_completion=False,
)


def _load_config_or_exit(config_path: Path | None) -> BootstrapConfig:
    ctx = get_output_context()
    try:
        return load_config(config_path)
    except FileNotFoundError:
        ctx.error(f"Config file not found: {config_path}")
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        ctx.error(f"Invalid config {config_path}: {e}")
    raise typer.Exit(2)


def _present(tools: dict[str, ToolStatus], name: str) -> bool:
    status = tools.get(name)
    return status is not None and status.present


@app.command()
def create(
    project_name: str = typer.Argument(
        ...,
        callback=_validate_name,
        help="Name of the new project (a valid Dart package name)",
    ),
    directory: Path = typer.Option(
        Path("."),
        "--dir",
        "-d",
        help="Parent directory for the new project",
    ),
    org: str | None = typer.Option(None, "--org", help="Organization (reverse domain)"),
    project_id: str | None = typer.Option(
        None,
        "--project-id",
        help="Firebase project id (empty to skip backend setup)",
    ),
    push: bool | None = typer.Option(
        None,
        "--push/--no-push",
        help="Create and push a GitHub repository",
    ),
    owner: str | None = typer.Option(None, "--owner", help="GitHub owner for the remote"),
    repo: str | None = typer.Option(None, "--repo", help="Remote repository name"),
    emulator: bool = typer.Option(
        False,
        "--emulator/--no-emulator",
        help="Use Firebase emulators by default in the generated app",
    ),
    flavors: bool = typer.Option(True, "--flavors/--no-flavors", help="Add dev/prod flavors"),
    ci: bool = typer.Option(True, "--ci/--no-ci", help="Generate a CI workflow"),
    open_editor: bool = typer.Option(
        True,
        "--open/--no-open",
        help="Open the project in the editor when done",
    ),
    no_input: bool = typer.Option(
        False,
        "--no-input",
        help="Never prompt; use option values and defaults",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        envvar=CONFIG_ENV_VAR,
        help="Path to a config.toml",
    ),
    write_config: Path | None = typer.Option(
        None,
        "--write-config",
        callback=_write_config_callback,
        is_eager=True,
        help="Write a default config.toml to PATH and exit",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
) -> None:
    """Create PROJECT_NAME with Firebase Authentication wired in."""
    console = configure_logging(verbosity=verbose, quiet=quiet, no_color=no_color)
    set_output_context(OutputContext(console=console, json_mode=json_output))
    ctx = get_output_context()

    config = _load_config_or_exit(config_path)
    requirements = build_requirements(config)
    tools = probe(requirements)

    # No prompts when check-prerequisites is going to abort the run.
    interactive = not (no_input or json_output) and requirements_met(requirements, tools)
    if project_id is None and interactive and _present(tools, "firebase"):
        project_id = typer.prompt(
            "Enter Firebase project ID (or press Enter to skip)",
            default="",
            show_default=False,
        )
    if push is None:
        push = interactive and _present(tools, "gh") and typer.confirm("Push to GitHub?")
    if push and interactive:
        if owner is None:
            owner = typer.prompt("GitHub owner", default="", show_default=False)
        if repo is None:
            repo = typer.prompt("Repository name", default=project_name)

    project = ProjectContext.create(
        project_name,
        directory,
        org=org or config.project.org,
        backend_project_id=project_id,
        use_emulator=emulator,
        flavors_enabled=flavors,
        ci_enabled=ci,
        push_remote=push,
        remote_owner=owner or None,
        remote_repo=repo,
        open_editor=open_editor,
    )
    logger.debug(f"Project context: {project.model_dump_json()}")

    step_context = StepContext(
        project=project,
        config=config,
        requirements=requirements,
        tools=tools,
        run_log=RunLog(),
    )
    result = Sequencer(build_steps()).run(step_context)
    ctx.summary(result)

    if not result.completed:
        ctx.print(
            f"[red]Bootstrap aborted at '{result.failed_step}'. "
            f"Partial files were left in {project.target_dir}[/red]"
        )
        raise typer.Exit(result.exit_code)

    ctx.print(f"[bold green]Project '{project_name}' bootstrapped with Firebase Auth![/bold green]")
    if not open_editor or result.states.get("open-editor") != StepState.SUCCEEDED:
        ctx.print(f"Open the project in '{project.target_dir}'")


def main() -> None:
    """Console script entry point."""
    app()
