"""
Unit tests for token estimation.
"""
import pytest

from toon_intent import tokens
from toon_intent.tokens import count_tokens_exact, estimate_tokens


def test_estimate_empty_is_zero():
    assert estimate_tokens("") == 0
    assert estimate_tokens("   \n\n\t") == 0


def test_estimate_rounds_up():
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def test_estimate_uses_normalized_text():
    assert estimate_tokens("a    b") == estimate_tokens("a b")
    assert estimate_tokens("line\n\n\n\nline") == estimate_tokens("line line")


def test_estimate_non_decreasing():
    previous = 0
    for n in range(0, 60):
        current = estimate_tokens("x" * n)
        assert current >= previous
        previous = current


def test_custom_ratio():
    assert estimate_tokens("abcd", chars_per_token=2) == 2


def test_invalid_ratio():
    with pytest.raises(ValueError):
        estimate_tokens("abc", chars_per_token=0)


def test_count_tokens_exact_uses_encoder(monkeypatch):
    class FakeEncoding:
        def encode(self, text):
            return text.split()

    monkeypatch.setattr(tokens, "_tiktoken_enc", FakeEncoding())
    assert count_tokens_exact("one two three") == 3


def test_count_tokens_exact_returns_none_on_failure(monkeypatch):
    class BrokenEncoding:
        def encode(self, text):
            raise RuntimeError("no encoding")

    monkeypatch.setattr(tokens, "_tiktoken_enc", BrokenEncoding())
    assert count_tokens_exact("text") is None
