"""
Organization Resolver.

Extracts the organization login from a company's website URL, e.g.
``https://github.com/PostHog/posthog`` resolves to ``PostHog``.
"""

from urllib.parse import urlparse

from errors import InvalidProfileURL


def resolve_organization(url: str) -> str:
    """
    Return the first non-empty path segment of a URL.

    Args:
        url (str): Company website URL

    Returns:
        str: Organization login

    Raises:
        InvalidProfileURL: If the URL cannot be parsed or has no path segment
    """
    try:
        parsed = urlparse((url or "").strip())
    except ValueError as e:
        raise InvalidProfileURL(f"Could not parse URL {url!r}: {e}") from e

    if not parsed.scheme or not parsed.netloc:
        raise InvalidProfileURL(f"Could not parse URL {url!r}")

    segments = [part for part in parsed.path.split("/") if part]
    if not segments:
        raise InvalidProfileURL(
            f"Invalid URL path in {url!r}. Could not extract organization name."
        )
    return segments[0]
