"""Derive the aggregation key (host) from an endpoint URL."""

from urllib.parse import urlsplit


class MalformedURL(ValueError):
    """The URL cannot be parsed or carries no host component."""


def domain_of(url: str) -> str:
    """
    Return the host component of ``url``, port included, user-info stripped.

    >>> domain_of("https://user:pw@api.example.com:8443/v1?q=1")
    'api.example.com:8443'
    """
    try:
        parts = urlsplit(url)
        # Accessing .port validates the port and bracketed IPv6 literals.
        parts.port
    except (ValueError, TypeError) as exc:
        raise MalformedURL(f"cannot parse URL {url!r}: {exc}") from exc

    host = parts.netloc.rpartition("@")[2]
    if not host:
        raise MalformedURL(f"URL {url!r} has no host component")
    return host
