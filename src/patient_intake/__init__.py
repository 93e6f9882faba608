"""Patient Intake - resilient submission of patient registration records."""

__version__ = "0.1.0"
