"""Repositories — SQLAlchemy implementations of the core boundary Protocols."""
