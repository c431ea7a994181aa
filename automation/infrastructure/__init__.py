"""Infrastructure layer: persistence adapters, evaluation sandbox, execution recorder."""
