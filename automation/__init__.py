"""Workflow automation engine: evaluates rule trees against business events."""

__version__ = "1.0.0"
