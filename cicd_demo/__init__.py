"""CI/CD demo API: two static JSON routes used as a pipeline payload."""

__version__ = "1.0.0"
