"""Shared BDD fixtures for the Community domain."""

import pytest


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def gathering():
    """The event under test."""
    return {"event_id": None}
