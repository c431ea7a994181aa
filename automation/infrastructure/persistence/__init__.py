"""SQLAlchemy persistence: engine/session factory, models and repositories."""
