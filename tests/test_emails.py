from __future__ import annotations

import pytest

from sendrec.domain.emails import is_valid_email, normalize_email


@pytest.mark.parametrize(
    "value",
    ["a@example.com", "first.last+tag@sub.example.co", "UPPER_case%1@Example.ORG"],
)
def test_valid_emails(value):
    assert is_valid_email(value)


@pytest.mark.parametrize(
    "value",
    [None, "", "plain", "a@b", "a@b.c", "a b@example.com", "@example.com", "a@example.com extra"],
)
def test_invalid_emails(value):
    assert not is_valid_email(value)


def test_normalize_strips_but_keeps_case():
    assert normalize_email("  Someone@Example.com\t") == "Someone@Example.com"
    assert normalize_email(None) == ""
