"""Entry point for running patient_intake as a module.

This allows the package to be executed as:
    python -m patient_intake
"""

from patient_intake.cli.main import cli

if __name__ == "__main__":
    cli()
