"""Navigation requests and responses exchanged by the crawler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urldefrag, urljoin


class OutOfScopeError(Exception):
    """Raised or reported when an endpoint falls outside the crawl scope."""

    def __init__(self, message: str = "out of scope") -> None:
        super().__init__(message)


def _without_empty(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value}


@dataclass
class Request:
    """A navigation request queued for the crawler."""

    method: str = ""
    url: str = ""
    body: str = ""
    depth: int = 0
    skip_validation: bool = False
    headers: dict[str, str] = field(default_factory=dict)
    tag: str = ""
    attribute: str = ""
    root_hostname: str = ""
    source: str = ""
    custom_fields: dict[str, list[str]] = field(default_factory=dict)
    raw: str = ""

    def request_url(self) -> str:
        """Return the key identifying this request: the URL, plus the body for POST."""
        if self.method == "GET":
            return self.url
        if self.method == "POST":
            return f"{self.url}:{self.body}"
        return ""

    def to_dict(self) -> dict[str, Any]:
        """Return the serialisable fields, leaving out empty ones."""
        return _without_empty(
            {
                "method": self.method,
                "endpoint": self.url,
                "body": self.body,
                "headers": dict(self.headers),
                "tag": self.tag,
                "attribute": self.attribute,
                "source": self.source,
                "raw": self.raw,
            }
        )


@dataclass
class Form:
    """An HTML form found in a response."""

    method: str = ""
    action: str = ""
    enctype: str = ""
    parameters: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the serialisable fields, leaving out empty ones."""
        return _without_empty(
            {
                "method": self.method,
                "action": self.action,
                "enctype": self.enctype,
                "parameters": list(self.parameters),
            }
        )


@dataclass
class Response:
    """A response produced by a crawler navigation.

    ``url`` is the URL of the request that produced the response; it is
    ``None`` when no HTTP exchange took place.
    """

    url: str | None = None
    depth: int = 0
    document: Any = None
    status_code: int = 0
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    content_length: int = 0
    root_hostname: str = ""
    technologies: list[str] = field(default_factory=list)
    raw: str = ""
    forms: list[Form] = field(default_factory=list)
    xhr_requests: list[Request] = field(default_factory=list)
    stored_response_path: str = ""

    def absolute_url(self, path: str) -> str:
        """Resolve ``path`` against the request URL, dropping any fragment.

        Returns an empty string for fragment-only links and unparsable values.
        """
        if path.startswith("#"):
            return ""
        if self.url is None:
            raise ValueError("response has no request URL to resolve against")
        try:
            joined = urljoin(self.url, path)
        except ValueError:
            return ""
        return urldefrag(joined).url

    def is_redirect(self) -> bool:
        """Whether the status code is a 3xx redirect."""
        return 300 <= self.status_code <= 399

    def header(self, name: str) -> str:
        """Return a header value looked up case-insensitively, or an empty string."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return ""

    def to_dict(self) -> dict[str, Any]:
        """Return the serialisable fields, leaving out empty ones."""
        return _without_empty(
            {
                "status_code": self.status_code,
                "headers": {key.lower(): value for key, value in self.headers.items()},
                "body": self.body,
                "content_length": self.content_length,
                "technologies": list(self.technologies),
                "raw": self.raw,
                "forms": [form.to_dict() for form in self.forms],
                "xhr_requests": [request.to_dict() for request in self.xhr_requests],
                "stored_response_path": self.stored_response_path,
            }
        )


def new_navigation_request_url_from_response(
    path: str, source: str, tag: str, attribute: str, resp: Response
) -> Request:
    """Build a GET navigation request for a link found in ``resp``."""
    return Request(
        method="GET",
        url=resp.absolute_url(path),
        root_hostname=resp.root_hostname,
        depth=resp.depth,
        source=source,
        attribute=attribute,
        tag=tag,
    )