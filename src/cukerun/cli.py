from __future__ import annotations

from typing import List, Optional

import typer

from cukerun.core import config as config_core, envelope, logs
from cukerun.core.executor import run_feature
from cukerun.core.feature_json import load_feature
from cukerun.core.harness import DataHarness
from cukerun.core.model import PASSING
from cukerun.core.steps_loader import StepLibraryError, load_steps
from cukerun.core.tags import TagSpec

VERSION = "0.1.0"

app = typer.Typer(add_completion=False, help="cukerun - run parsed BDD features against step libraries")


def _emit(out: dict) -> None:
    typer.echo(envelope.dumps(out))
    if out.get("ok") is True:
        raise typer.Exit(code=0)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="loguru level for stderr output"),
):
    try:
        level = log_level.upper() if log_level else config_core.log_level()
    except ValueError as exc:
        _emit(envelope.err(command="cukerun", error_type="INVALID_ARGUMENT", message=str(exc)))
    logs.configure_logging(level)


@app.command()
def version(json_output: bool = typer.Option(False, "--json", help="Output JSON envelope")):
    if json_output:
        _emit(envelope.ok(command="version", data={"version": VERSION}))
    typer.echo(f"cukerun {VERSION}")


@app.command()
def run(
    feature_path: str = typer.Argument(..., help="Parsed feature as a JSON document"),
    steps: List[str] = typer.Option(..., "--steps", help="Module exposing STEPS; repeatable"),
    tags: Optional[str] = typer.Option(None, "--tags", help="e.g. @smoke,~@slow"),
    extra_fields: Optional[bool] = typer.Option(
        None, "--extra-fields/--no-extra-fields", help="Also pass the step stash to actions"
    ),
):
    """Execute every scenario of one feature and report step results."""
    details = {"feature": feature_path, "steps": steps, "tags": tags}
    try:
        feature = load_feature(feature_path)
    except FileNotFoundError as exc:
        _emit(envelope.err(command="run", error_type="NOT_FOUND", message=str(exc), details=details))
    except ValueError as exc:
        _emit(envelope.err(command="run", error_type="INVALID_ARGUMENT", message=str(exc), details=details))

    try:
        tag_spec = TagSpec.parse(tags) if tags else None
        if extra_fields is None:
            extra_fields = config_core.extra_fields_enabled()
    except ValueError as exc:
        _emit(envelope.err(command="run", error_type="INVALID_ARGUMENT", message=str(exc), details=details))

    try:
        definitions = [triple for module in steps for triple in load_steps(module)]
    except StepLibraryError as exc:
        _emit(
            envelope.err(
                command="run",
                error_type="STEP_LIBRARY_FAILED",
                message=str(exc),
                details={**details, "module": exc.module},
            )
        )

    harness = DataHarness()
    run_feature(feature, definitions, harness, tag_spec=tag_spec, extra_fields=extra_fields)
    report = harness.to_dict()

    if harness.feature_status() == PASSING:
        _emit(envelope.ok(command="run", data=report))
    _emit(
        envelope.err(
            command="run",
            error_type="STEPS_FAILED",
            message=f"Feature {feature.name!r} finished with status {report['status']}",
            details=report,
        )
    )


if __name__ == "__main__":
    app()
