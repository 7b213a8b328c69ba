"""Duet - a private two-person voice message space."""

__version__ = "0.1.0"
