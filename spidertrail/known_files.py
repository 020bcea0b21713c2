"""Discovery of endpoints from well-known files: robots.txt and sitemap.xml."""

from __future__ import annotations

import urllib.error
import urllib.request
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from email.message import Message
from xml.etree import ElementTree

from .navigation import Request, Response, new_navigation_request_url_from_response

WEB_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FETCH_TIMEOUT = 10.0


class KnownFileError(Exception):
    """A known file could not be fetched or parsed.

    ``partial`` holds the requests gathered before the failure.
    """

    def __init__(self, message: str, partial: Iterable[Request] | None = None) -> None:
        super().__init__(message)
        self.partial: list[Request] = list(partial or [])


@dataclass
class FetchedFile:
    """The outcome of fetching a known file."""

    url: str
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


Fetcher = Callable[[str], FetchedFile]


def _flatten_headers(message: Message) -> dict[str, str]:
    flat: dict[str, str] = {}
    for key in dict.fromkeys(message.keys()):
        flat[key] = ", ".join(message.get_all(key) or [])
    return flat


def _to_fetched(resp, status: int) -> FetchedFile:
    data = resp.read()
    charset = resp.headers.get_content_charset() or "utf-8"
    return FetchedFile(
        url=resp.geturl(),
        status_code=status,
        headers=_flatten_headers(resp.headers),
        body=data.decode(charset, errors="replace"),
    )


def http_fetch(url: str) -> FetchedFile:
    """GET ``url`` and return its final URL, status, headers and text.

    Error statuses are returned like any other response; network failures
    raise ``OSError``.
    """
    request = urllib.request.Request(url, headers={"User-Agent": WEB_USER_AGENT}, method="GET")
    try:
        with urllib.request.urlopen(request, timeout=FETCH_TIMEOUT) as resp:
            return _to_fetched(resp, resp.status)
    except urllib.error.HTTPError as err:
        with err:
            return _to_fetched(err, err.code)


def _file_response(fetched: FetchedFile) -> Response:
    return Response(
        depth=2,
        url=fetched.url,
        status_code=fetched.status_code,
        headers=dict(fetched.headers),
    )


def _fetch(fetch: Fetcher, url: str, tag: str) -> FetchedFile:
    try:
        return fetch(url)
    except ValueError as err:
        raise KnownFileError(f"{tag}: could not create request: {err}") from err
    except OSError as err:
        raise KnownFileError(f"{tag}: could not do request: {err}") from err


class RobotsTxtCrawler:
    """Extracts Allow and Disallow paths from robots.txt."""

    def __init__(self, fetch: Fetcher = http_fetch) -> None:
        self._fetch = fetch

    def visit(self, url: str) -> list[Request]:
        """Fetch robots.txt under ``url`` and return the paths it lists."""
        fetched = _fetch(self._fetch, f"{url.removesuffix('/')}/robots.txt", "robotscrawler")
        return self.parse(fetched.body, fetched)

    def parse(self, text: str, fetched: FetchedFile) -> list[Request]:
        """Return a request for every allow/disallow directive in ``text``."""
        requests = []
        for line in text.splitlines():
            directive, sep, value = line.partition(": ")
            if not sep:
                continue
            directive = directive.lower()
            if directive.startswith("allow") or directive == "disallow":
                requests.append(
                    new_navigation_request_url_from_response(
                        value.strip(" "), fetched.url, "file", "robotstxt", _file_response(fetched)
                    )
                )
        return requests


def _local_name(tag: object) -> str:
    return tag.rpartition("}")[2] if isinstance(tag, str) else ""


class SitemapXmlCrawler:
    """Extracts page and sub-sitemap locations from sitemap.xml."""

    def __init__(self, fetch: Fetcher = http_fetch) -> None:
        self._fetch = fetch

    def visit(self, url: str) -> list[Request]:
        """Fetch sitemap.xml under ``url`` and return the locations it lists."""
        fetched = _fetch(self._fetch, f"{url.removesuffix('/')}/sitemap.xml", "sitemapcrawler")
        try:
            return self.parse(fetched.body, fetched)
        except KnownFileError as err:
            raise KnownFileError(f"sitemapcrawler: could not parse sitemap: {err}") from err

    def parse(self, text: str, fetched: FetchedFile) -> list[Request]:
        """Return a request for every ``url`` then every ``sitemap`` location."""
        try:
            root = ElementTree.fromstring(text)
        except ElementTree.ParseError as err:
            raise KnownFileError(f"sitemapcrawler: could not decode xml: {err}") from err
        requests = []
        for kind in ("url", "sitemap"):
            for entry in root:
                if _local_name(entry.tag) != kind:
                    continue
                loc = next((child for child in entry if _local_name(child.tag) == "loc"), None)
                location = "".join(loc.itertext()) if loc is not None else ""
                requests.append(
                    new_navigation_request_url_from_response(
                        location.strip(" \t\n"), fetched.url, "file", "sitemapxml", _file_response(fetched)
                    )
                )
        return requests


class KnownFiles:
    """Runs the known-file crawlers selected by name.

    ``"robotstxt"`` and ``"sitemapxml"`` select one crawler; any other value
    selects both.
    """

    def __init__(self, files: str, fetch: Fetcher = http_fetch) -> None:
        robots = RobotsTxtCrawler(fetch)
        sitemap = SitemapXmlCrawler(fetch)
        if files == "robotstxt":
            self._visitors = [robots.visit]
        elif files == "sitemapxml":
            self._visitors = [sitemap.visit]
        else:
            self._visitors = [robots.visit, sitemap.visit]

    def request(self, url: str) -> list[Request]:
        """Visit every selected known file under ``url``."""
        found: list[Request] = []
        for visit in self._visitors:
            try:
                found.extend(visit(url))
            except KnownFileError as err:
                err.partial = list(found)
                raise
        return found