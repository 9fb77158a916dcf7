"""Core utilities: logging, validation, paths and exceptions."""
