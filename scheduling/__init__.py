"""Appointment scheduling core for dealership test drives and service visits."""

__version__ = "0.1.0"
