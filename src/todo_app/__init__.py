"""To-do list application: a reactive task repository over a local SQLite table."""

__version__ = "0.1.0"
