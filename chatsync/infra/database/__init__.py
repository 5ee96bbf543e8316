"""Async SQLAlchemy persistence layer: engine, ORM models, repositories."""
