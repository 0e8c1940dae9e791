"""
Organization Resolver tests.
"""

import pytest

from analyzers.organization import resolve_organization
from errors import InvalidProfileURL, ParseError


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://github.com/PostHog", "PostHog"),
        ("https://github.com/elastic/", "elastic"),
        ("https://github.com/hashicorp/terraform/tree/main", "hashicorp"),
        ("https://example.com//acme//extra", "acme"),
    ],
)
def test_resolve_organization_first_segment(url, expected):
    assert resolve_organization(url) == expected


@pytest.mark.parametrize(
    "url", ["https://github.com", "https://github.com/", "not a url", "", "/org"]
)
def test_resolve_organization_invalid(url):
    with pytest.raises(InvalidProfileURL):
        resolve_organization(url)


def test_invalid_profile_url_is_parse_error():
    assert issubclass(InvalidProfileURL, ParseError)
