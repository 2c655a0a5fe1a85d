"""Shared pytest fixtures for switchwire tests."""

import pytest

from switchwire import ComponentDescriptor


@pytest.fixture()
def descriptor() -> ComponentDescriptor:
    """Component descriptor without declared accessors."""
    return ComponentDescriptor(name="AppComponent")
