"""Command-line interface for schedlang."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from schedlang.builder import compile_schedule
from schedlang.cli_errors import error_boundary, require_file
from schedlang.compiler import RuleGroup
from schedlang.config import CompilerConfig, configure_logging, load_config
from schedlang.fields import FIELD_CONSTRAINTS, FieldKind

app = typer.Typer(
    name="schedlang",
    help="Compile schedule expressions into rule groups",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Type Aliases
# =============================================================================

ExpressionArg = Annotated[str, typer.Argument(help="Schedule expression, e.g. 'hour(9-17) day(mon-fri)'")]

ConfigOpt = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="YAML configuration file"),
]

VerboseOpt = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]


# =============================================================================
# Helper Functions
# =============================================================================


def _load(config_file: Path | None, verbose: bool) -> CompilerConfig:
    if config_file is not None:
        require_file(config_file)
    config = load_config(config_file)
    configure_logging("DEBUG" if verbose else config.log_level)
    return config


def _format_ranges(ranges: list) -> str:
    return ", ".join(str(r) for r in ranges)


def build_group_table(group: RuleGroup, number: int) -> Table:
    """Render one rule group as a table."""
    table = Table(title=f"Group {number}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Include")
    table.add_column("Exclude")

    for kind in group.fields:
        table.add_row(
            kind.value,
            _format_ranges(group.includes.get(kind, [])),
            _format_ranges(group.excludes.get(kind, [])),
        )
    if group.has_dates and not group.has(FieldKind.DATES):
        table.add_row(FieldKind.DATES.value, "any", "")

    return table


# =============================================================================
# Commands
# =============================================================================


@app.command(name="compile")
@error_boundary
def compile_cmd(
    expression: ExpressionArg,
    config_file: ConfigOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Compile an expression and print its rule groups."""
    config = _load(config_file, verbose)
    groups = compile_schedule(expression, config)

    for number, group in enumerate(groups, start=1):
        console.print(build_group_table(group, number))


@app.command(name="validate")
@error_boundary
def validate_cmd(
    expression: ExpressionArg,
    config_file: ConfigOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Check that an expression compiles."""
    config = _load(config_file, verbose)
    groups = compile_schedule(expression, config)
    typer.echo(f"Valid ({len(groups)} rule group{'s' if len(groups) != 1 else ''})")


@app.command(name="fields")
def fields_cmd() -> None:
    """List the fields that expressions can constrain."""
    table = Table(title="Fields")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Min")
    table.add_column("Max")
    table.add_column("Names")

    for kind, constraints in FIELD_CONSTRAINTS.items():
        table.add_row(
            kind.value,
            str(constraints.min_value),
            str(constraints.max_value),
            ", ".join(constraints.aliases),
        )

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
