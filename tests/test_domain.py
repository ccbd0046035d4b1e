"""Tests for root domain resolution."""

import pytest

from sonub.session.domain import root_domain


@pytest.mark.parametrize("hostname", ["localhost", "abc.com", "co.kr", ""])
def test__root_domain__two_labels_or_fewer_unchanged(hostname: str) -> None:
    assert root_domain(hostname) == hostname


@pytest.mark.parametrize(
    ("hostname", "expected"),
    [
        ("www.abc.com", "abc.com"),
        ("a.b.abc.com", "abc.com"),
        ("sub.abc.co.kr", "abc.co.kr"),
        ("www.abc.co.kr", "abc.co.kr"),
        ("x.y.abc.or.jp", "abc.or.jp"),
    ],
)
def test__root_domain__subdomains(hostname: str, expected: str) -> None:
    assert root_domain(hostname) == expected


def test__root_domain__two_letter_heuristic_is_syntactic() -> None:
    """Any 2+2 ending is treated as a country code second level domain."""
    assert root_domain("www.ab.cd") == "www.ab.cd"
    assert root_domain("blog.www.ab.cd") == "www.ab.cd"
