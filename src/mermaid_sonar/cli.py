"""Mermaid Sonar CLI interface.

Commands:
- analyze: Analyze Mermaid diagrams in files and directories
- rules: List the registered rules
- profiles: List viewport profiles
- init: Write a default configuration file

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON-lines log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from mermaid_sonar import __version__
from mermaid_sonar.config import (
    OUTPUT_FORMATS,
    ConfigError,
    SonarConfig,
    ViewportOverrides,
    create_default_config,
    load_config,
    resolve_config,
)
from mermaid_sonar.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="mermaid-sonar",
    help="Detect hidden complexity in Mermaid diagrams",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: SonarConfig | None = None
_logger = get_logger()

CONFIG_DIR = Path(".mermaid-sonar")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mermaid-sonar {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log lines",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Mermaid Sonar - static readability analysis for Mermaid diagrams.

    Estimates size and complexity of diagrams in markdown and .mmd files
    without rendering them.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug("Loaded config from: %s", _config.config_path)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except ConfigError as e:
        _logger.error("Invalid configuration: %s", e)
        raise typer.Exit(1)


def _current_config() -> SonarConfig:
    return _config if _config is not None else SonarConfig()


# =============================================================================
# analyze command
# =============================================================================


@app.command()
def analyze(
    paths: Annotated[
        list[Path],
        typer.Argument(
            help="Markdown/Mermaid files or directories to analyze",
        ),
    ],
    format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format: text, json, junit, github, markdown",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the report to a file instead of stdout",
        ),
    ] = None,
    viewport_profile: Annotated[
        str | None,
        typer.Option(
            "--viewport-profile",
            "-p",
            help="Viewport profile: default, mkdocs, docusaurus, github, mobile or a configured one",
        ),
    ] = None,
    max_width: Annotated[
        int | None,
        typer.Option(
            "--max-width",
            help="Maximum diagram width in pixels (overrides the profile)",
        ),
    ] = None,
    max_height: Annotated[
        int | None,
        typer.Option(
            "--max-height",
            help="Maximum diagram height in pixels (overrides the profile)",
        ),
    ] = None,
    no_rules: Annotated[
        bool,
        typer.Option(
            "--no-rules",
            help="Disable rule validation (only compute metrics)",
        ),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Treat warnings as failures",
        ),
    ] = False,
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-w",
            help="Number of files analyzed in parallel",
            min=1,
        ),
    ] = 1,
) -> None:
    """Analyze Mermaid diagrams.

    Exit codes:
        0: No error-severity issues
        1: Error-severity issues (or warnings with --strict), or a
           configuration or file read fault
    """
    from mermaid_sonar.pipeline import AnalysisPipeline, PipelineOptions
    from mermaid_sonar.renderers import render_report

    config = _current_config()

    output_format = format or config.output.format
    if output_format not in OUTPUT_FORMATS:
        _logger.error("Invalid format: %s. Use one of: %s", output_format, ", ".join(OUTPUT_FORMATS))
        raise typer.Exit(1)

    overrides = ViewportOverrides(
        profile=viewport_profile,
        max_width=max_width,
        max_height=max_height,
    )
    try:
        resolved = resolve_config(config, overrides)
    except ConfigError as e:
        _logger.error("Invalid configuration: %s", e)
        raise typer.Exit(1)

    _logger.debug(
        "Viewport: %s (%dx%d)",
        resolved.viewport.name,
        resolved.viewport.max_width,
        resolved.viewport.max_height,
    )

    pipeline = AnalysisPipeline(
        config=resolved,
        options=PipelineOptions(workers=workers, run_rules=not no_rules),
    )
    report = pipeline.analyze_paths(paths)

    output_path = output or (Path(config.output.path) if config.output.path else None)
    if output_path is not None:
        content = render_report(report, output_format)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        _logger.info("Wrote %s report to %s", output_format, output_path)
    else:
        typer.echo(render_report(report, output_format, color=True), nl=False)

    summary = report.summary()
    _logger.structured(logging.DEBUG, "Run summary", **summary)

    fail_on_warning = strict or config.ci.fail_on_warning
    if report.failures:
        raise typer.Exit(1)
    if report.has_errors or (fail_on_warning and report.has_warnings):
        raise typer.Exit(1)
    raise typer.Exit(0)


# =============================================================================
# rules command
# =============================================================================


@app.command()
def rules(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output rule metadata as JSON",
        ),
    ] = False,
) -> None:
    """List the registered rules in evaluation order."""
    from mermaid_sonar.rules import default_registry

    config = _current_config()
    registry = default_registry()

    entries = []
    for metadata in registry.get_metadata():
        rule_config = config.rules.get(metadata["name"])
        metadata["enabled"] = rule_config.enabled if rule_config else True
        entries.append(metadata)

    if json_output:
        typer.echo(json.dumps(entries, indent=2))
        return

    for entry in entries:
        threshold = entry["default_threshold"]
        threshold_str = f" (threshold {threshold})" if threshold is not None else ""
        status = "" if entry["enabled"] else " [disabled]"
        typer.echo(f"{entry['name']:<32} {entry['default_severity']:<8}{threshold_str}{status}")
        typer.echo(f"    {entry['description']}")


# =============================================================================
# profiles command
# =============================================================================


@app.command()
def profiles(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output profiles as JSON",
        ),
    ] = False,
) -> None:
    """List built-in and configured viewport profiles."""
    available = _current_config().available_profiles()

    if json_output:
        typer.echo(json.dumps([profile.to_dict() for profile in available.values()], indent=2))
        return

    for name, profile in available.items():
        width = "/".join(str(v) for v in profile.width_thresholds.as_tuple())
        height = "/".join(str(v) for v in profile.height_thresholds.as_tuple())
        typer.echo(f"{name:<12} {profile.max_width}x{profile.max_height}px  {profile.description}")
        typer.echo(f"    width tiers {width}  height tiers {height}")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize Mermaid Sonar configuration.

    Creates .mermaid-sonar/config.yaml with every rule and setting at its
    default value.
    """
    CONFIG_DIR.mkdir(exist_ok=True)
    config_file = CONFIG_DIR / "config.yaml"

    if config_file.exists() and not force:
        _logger.error("Config already exists: %s", config_file)
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info("Created config: %s", config_file)

    typer.echo(f"Mermaid Sonar configuration initialized: {config_file}")


if __name__ == "__main__":
    app()
