"""Reporting core and web/CLI shell for a vehicle service center."""

__version__ = "0.1.0"
