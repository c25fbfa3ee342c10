"""A small interactive Unix shell with pipelines, redirection and job control."""

__version__ = "0.1.0"

__all__ = ["builtins", "executor", "jobs", "net", "parsing", "rio", "shell"]