"""TaskFlow CLI - project and task tracking client for the TaskFlow API."""

__version__ = "0.1.0"
