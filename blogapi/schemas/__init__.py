"""Pydantic schemas describing the public API contract."""
