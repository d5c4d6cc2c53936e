"""Bulk loader that pushes local JSON records into a remote datastore."""

__version__ = "0.1.0"
