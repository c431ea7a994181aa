"""Pydantic schemas for workflow definitions crossing the library boundary."""
