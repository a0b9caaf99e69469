"""
apidsl CLI.

    apidsl check design.py            # evaluate and report every error
    apidsl check design.py -f json    # machine-readable report
"""

from __future__ import annotations

import json
import logging
import platform
from pathlib import Path

import typer

from apidsl._version import __version__
from apidsl.core.config import DesignConfig, find_config, load_config
from apidsl.core.errors import ApiDslError, EvalError
from apidsl.runner import load_design, run_design

app = typer.Typer(
    help="Evaluate apidsl designs and report design errors",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"apidsl version {__version__}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """apidsl - declarative design language for service APIs."""


@app.command()
def check(
    path: Path = typer.Argument(..., help="Python file defining design(ctx)"),  # noqa: B008
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="apidsl.toml or pyproject.toml (default: searched upwards from the design file)",
    ),
    format: str = typer.Option("human", "--format", "-f", help="Output format: 'human' or 'json'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log DSL evaluation details"),
) -> None:
    """
    Evaluate a design and report every error found in the pass.
    """
    try:
        cfg = _load_config(path, config)
        logging.basicConfig(
            level=logging.DEBUG if verbose else cfg.log_level_value,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        fn = load_design(path)
        outcome = run_design(fn, cfg)
    except ApiDslError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if format == "json":
        typer.echo(json.dumps(_json_report(outcome.errors), indent=2))
    else:
        print_human_errors(outcome.errors)

    if not outcome.ok:
        raise typer.Exit(code=1)


def print_human_errors(errors: list[EvalError]) -> None:
    """Print design errors in human-readable format."""
    if not errors:
        typer.echo("OK: design is valid.")
        return

    typer.echo(f"Design evaluation failed with {len(errors)} error(s):\n", err=True)
    for err in errors:
        typer.echo(f"ERROR: {err}", err=True)
        if err.context and err.context.snippet:
            typer.echo(err.context.format_snippet(), err=True)


def _json_report(errors: list[EvalError]) -> dict[str, object]:
    return {
        "ok": not errors,
        "errors": [
            {
                "kind": str(err.kind),
                "message": err.message,
                "target": err.target,
                "file": str(err.context.file) if err.context else None,
                "line": err.context.line if err.context else None,
            }
            for err in errors
        ],
    }


def _load_config(design_path: Path, config_path: Path | None) -> DesignConfig:
    if config_path is None:
        config_path = find_config(design_path)
    if config_path is None:
        return DesignConfig()
    return load_config(config_path)


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    app(args=argv)


if __name__ == "__main__":
    main()
