"""Tests for id generation and blank checks."""

from __future__ import annotations

import uuid

import pytest

from jobreg.domain.ids import generate_id, is_blank


class TestGenerateId:
    def test_is_uuid4(self) -> None:
        assert uuid.UUID(generate_id()).version == 4

    def test_canonical_hyphenated_form(self) -> None:
        value = generate_id()
        assert len(value) == 36
        assert str(uuid.UUID(value)) == value

    def test_unique(self) -> None:
        assert len({generate_id() for _ in range(100)}) == 100


class TestIsBlank:
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank(self, value: str | None) -> None:
        assert is_blank(value)

    def test_not_blank(self) -> None:
        assert not is_blank(" app1 ")
