"""Score crawler output against the expected endpoints of a crawl maze."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from urllib.parse import urlsplit

log = logging.getLogger(__name__)

URL_TEST_PREFIX = "/test"

_FOUND = ".found"

# Maze endpoints as (directory, suffix, names), kept in report order.
_ENDPOINT_GROUPS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("/css", _FOUND, ("font-face",)),
    ("/headers", _FOUND, ("content-location", "link", "location", "refresh")),
    ("/html", _FOUND, ("doctype", "manifest")),
    ("/html/body", _FOUND, ("background",)),
    ("/html/body/a", _FOUND, ("href", "ping")),
    ("/html/body/audio", _FOUND, ("src",)),
    ("/html/body/audio/source", _FOUND, ("src", "srcset1x", "srcset2x")),
    ("/html/body/applet", _FOUND, ("archive", "codebase")),
    ("/html/body/blockquote", _FOUND, ("cite",)),
    ("/html/body/embed", _FOUND, ("src",)),
    ("/html/body/form", _FOUND, ("action-get", "action-post")),
    ("/html/body/form/button", _FOUND, ("formaction",)),
    ("/html/body/frameset/frame", _FOUND, ("src",)),
    ("/html/body/iframe", _FOUND, ("src", "srcdoc")),
    (
        "/html/body/img",
        _FOUND,
        ("dynsrc", "lowsrc", "longdesc", "src-data", "src", "srcset1x", "srcset2x"),
    ),
    ("/html/body/input", _FOUND, ("src",)),
    ("/html/body/isindex", _FOUND, ("action",)),
    ("/html/body/map/area", _FOUND, ("ping",)),
    ("/html/body/object", _FOUND, ("data", "codebase")),
    ("/html/body/object/param", _FOUND, ("value",)),
    ("/html/body/script", _FOUND, ("src",)),
    ("/html/body/svg/image", _FOUND, ("xlink",)),
    ("/html/body/svg/script", _FOUND, ("xlink",)),
    ("/html/body/table", _FOUND, ("background",)),
    ("/html/body/table/td", _FOUND, ("background",)),
    ("/html/body/video", _FOUND, ("src",)),
    ("/html/body/video/track", _FOUND, ("src",)),
    ("/html/body/video", _FOUND, ("poster",)),
    ("/html/head", _FOUND, ("profile",)),
    ("/html/head/base", _FOUND, ("href",)),
    ("/html/head", _FOUND, ("comment-conditional",)),
    ("/html/head/import", _FOUND, ("implementation",)),
    ("/html/head/link", _FOUND, ("href",)),
    (
        "/html/head/meta",
        _FOUND,
        ("content-csp", "content-pinned-websites", "content-reading-view", "content-redirect"),
    ),
    (
        "/html/misc/url",
        _FOUND,
        ("full-url", "path-relative-url", "protocol-relative-url", "root-relative-url"),
    ),
    ("/html/misc/string", _FOUND, ("dot-dot-slash-prefix", "dot-slash-prefix", "url-string")),
    ("/html/misc/string", ".pdf", ("string-known-extension",)),
    (
        "/javascript/misc",
        _FOUND,
        ("automatic-post", "comment", "string-variable", "string-concat-variable"),
    ),
    ("/javascript/frameworks/angular", _FOUND, ("event-handler", "router-outlet")),
    ("/javascript/frameworks/angularjs", _FOUND, ("ng-href",)),
    ("/javascript/frameworks/polymer", _FOUND, ("event-handler", "polymer-router")),
    ("/javascript/frameworks/react", _FOUND, ("route-path", "index.html/search")),
    (
        "/javascript/interactive",
        _FOUND,
        (
            "js-delete",
            "js-post",
            "js-post-event-listener",
            "js-put",
            "listener-and-event-attribute-first",
            "listener-and-event-attribute-second",
            "multi-step-request-event-attribute",
        ),
    ),
    (
        "/test/javascript/interactive",
        _FOUND,
        ("multi-step-request-event-listener-div-dom", "multi-step-request-event-listener-div"),
    ),
    (
        "/javascript/interactive",
        _FOUND,
        (
            "multi-step-request-event-listener-dom",
            "multi-step-request-event-listener",
            "multi-step-request-redefine-event-attribute",
            "multi-step-request-remove-button",
            "multi-step-request-remove-event-listener",
            "two-listeners-first",
            "two-listeners-second",
        ),
    ),
    ("/misc/known-files", _FOUND, ("robots.txt", "sitemap.xml")),
)


def _expand_groups() -> Iterator[str]:
    for directory, suffix, names in _ENDPOINT_GROUPS:
        for name in names:
            yield f"{directory}/{name}{suffix}"


EXPECTED_RESULTS: tuple[str, ...] = tuple(_expand_groups())

_GREEN = "\x1b[32m"
_RED = "\x1b[31m"
_RESET = "\x1b[0m"


def colorize_text(text: str, value: bool) -> str:
    """Return ``text:yes`` in green or ``text:no`` in red."""
    if value:
        return f"{_GREEN}{text}:yes{_RESET}"
    return f"{_RED}{text}:no{_RESET}"


def stripped_link(link: str) -> str:
    """Return the path component of ``link``."""
    try:
        return urlsplit(link).path
    except ValueError as err:
        log.warning("failed to parse link while extracting path: %s", err)
        return ""


def read_found_links(path: str) -> list[str]:
    """Read paths of ``.found`` links from a crawler output file.

    Reading stops at the first empty line.
    """
    links = []
    with open(path, encoding="utf-8", errors="replace") as handle:
        for raw in handle:
            text = raw.rstrip("\r\n")
            if not text:
                break
            if _FOUND in text:
                links.append(stripped_link(text))
    return links


@dataclass
class ScoreReport:
    """Per-endpoint matches for the standard and headless crawls."""

    rows: list[tuple[str, bool, bool]]
    total_links: int
    total_links_headless: int

    @property
    def matches(self) -> int:
        return sum(normal for _, normal, _ in self.rows)

    @property
    def matches_headless(self) -> int:
        return sum(headless for _, _, headless in self.rows)

    @property
    def normal_score(self) -> int:
        """Percentage of expected endpoints found, rounded down."""
        return self.matches * 100 // len(self.rows) if self.rows else 0

    @property
    def headless_score(self) -> int:
        """Percentage of expected endpoints found headless, rounded down."""
        return self.matches_headless * 100 // len(self.rows) if self.rows else 0

    def lines(self) -> list[str]:
        """Return the report as printable lines."""
        total = len(self.rows)
        out = [
            f"[{colorize_text('standard', normal)}] [{colorize_text('headless', headless)}] {expected}"
            for expected, normal, headless in self.rows
        ]
        out.append(
            f"[info] Total links ({total}): Standard=>{self.total_links} "
            f"Headless=>{self.total_links_headless}"
        )
        out.append(
            f"[info] Total: {total} NormalMatches=>{self.matches} "
            f"HeadlessMatches=>{self.matches_headless}"
        )
        out.append(
            f"[info] Score: Normal=>{float(self.normal_score):.2f}% "
            f"Headless=>{float(self.headless_score):.2f}%"
        )
        return out


def score(links: Sequence[str], links_headless: Sequence[str]) -> ScoreReport:
    """Compare found link paths against the expected maze endpoints."""
    found = set(links)
    found_headless = set(links_headless)
    rows = [
        (path, path in found, path in found_headless)
        for path in (URL_TEST_PREFIX + endpoint for endpoint in EXPECTED_RESULTS)
    ]
    return ScoreReport(rows=rows, total_links=len(links), total_links_headless=len(links_headless))


def compare_output(got: Iterable[str], expected: Iterable[str]) -> bool:
    """Whether two outputs hold the same lines in the same order."""
    return list(got) == list(expected)


def main(argv: Sequence[str] | None = None) -> int:
    """Print the score of a standard and a headless crawl output file."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("Usage: crawl-maze-score output.txt output_headless.txt", end="")
        return 0
    try:
        links = read_found_links(args[0])
        links_headless = read_found_links(args[1])
    except OSError as err:
        print(err, file=sys.stderr)
        return 1
    print("\n".join(score(links, links_headless).lines()))
    return 0


if __name__ == "__main__":
    sys.exit(main())