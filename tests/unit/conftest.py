"""Shared fixtures."""
import pytest

from toon_intent import ToonConverter


@pytest.fixture
def converter():
    """A converter with the default 4 characters per token."""
    return ToonConverter(chars_per_token=4.0)
