"""Mock records API CLI commands for Patient Intake."""

from pathlib import Path

import click

from patient_intake.mock_server.app import CREATE_PATIENT_PATH, run_server
from patient_intake.mock_server.config import load_config


@click.group(name="mock")
def mock_group():
    """Run the mock records API.

    The mock server provides:
    - /health - Health check endpoint
    - /api/Users/v1/CreatePatient - Record-creation endpoint
    """


@mock_group.command(name="start")
@click.option("--host", type=str, help="Bind address (overrides config file)")
@click.option("--port", type=int, help="Server port (overrides config file)")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (default: mocks/config.json)"
)
@click.option("--debug", is_flag=True, help="Enable debug mode")
def start_server(
    host: str | None,
    port: int | None,
    config: Path | None,
    debug: bool
):
    """Start the mock records API in the foreground.

    Examples:

        patient-intake mock start

        patient-intake mock start --port 9090
    """
    try:
        mock_config = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        click.secho(f"Error loading mock server configuration: {e}", fg="red", err=True)
        raise click.exceptions.Exit(1)

    bound_port = port or mock_config.http_port
    click.echo(
        f"Mock records API: http://{host or mock_config.host}:{bound_port}{CREATE_PATIENT_PATH}"
    )
    run_server(host=host, port=port, config=mock_config, debug=debug)
