"""Core: configuration and engine-wide constants."""
