"""Main CLI entry point for Patient Intake.

This module provides the main Click command group for the patient-intake CLI.
"""

from pathlib import Path
from typing import Optional

import click

from patient_intake import __version__
from patient_intake.cli.mock_commands import mock_group
from patient_intake.cli.record_commands import record
from patient_intake.config import load_config
from patient_intake.logging_audit import configure_logging
from patient_intake.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="patient-intake")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-pii",
    is_flag=True,
    help="Redact PII (patient names, SSNs, emails) from logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_pii: bool,
) -> None:
    """Patient Intake - registration record submission tool.

    Validates patient registration records and submits them to the remote
    records API with retry and backoff.

    Common usage:

        # Check a record for missing fields and format problems
        patient-intake record validate patient.json

        # Submit a record
        patient-intake record submit patient.json

        # Run the mock records API locally
        patient-intake mock start

    Use --help with any command for more information.
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact_pii_setting = redact_pii or config_obj.logging.redact_pii

    configure_logging(
        level=log_level, log_file=log_file_path, redact_pii=redact_pii_setting
    )


cli.add_command(record)
cli.add_command(mock_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        patient-intake config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")
    click.echo("\nEndpoints:")
    click.echo(f"  CreatePatient URL: {config_obj.endpoints.create_patient_url}")

    click.echo("\nTransport:")
    click.echo(f"  Verify TLS:    {config_obj.transport.verify_tls}")
    click.echo(f"  Timeout:       {config_obj.transport.timeout}s per attempt")
    click.echo(f"  Max attempts:  {config_obj.transport.max_attempts}")
    click.echo(f"  Backoff base:  {config_obj.transport.backoff_base}s")

    click.echo("\nLogging:")
    click.echo(f"  Level:       {config_obj.logging.level}")
    click.echo(f"  Log file:    {config_obj.logging.log_file}")
    click.echo(f"  Redact PII:  {config_obj.logging.redact_pii}")


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"patient-intake version {__version__}")


if __name__ == "__main__":
    cli()
