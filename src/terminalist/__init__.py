"""Terminalist - terminal client for remote task services with a local cache."""

__version__ = "0.3.0"
