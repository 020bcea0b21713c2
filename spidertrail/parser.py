"""Response parsers that turn a navigation response into new requests."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Pattern

from . import tags
from .navigation import Request, Response, new_navigation_request_url_from_response

ParserFunc = Callable[[Response], list[Request]]

_LINK_TARGET = re.compile(r"<([^>]*)>")
_REFRESH_URL = re.compile(r"^\s*url\s*=\s*(.*)$", re.IGNORECASE | re.DOTALL)


class Part(str, Enum):
    """The part of a response a custom field is extracted from."""

    BODY = "body"
    HEADER = "header"
    RESPONSE = "response"


class ParserKind(Enum):
    """What a parser needs from a response before it can run."""

    HEADER = 1
    BODY = 2
    CONTENT = 3


@dataclass
class CustomFieldConfig:
    """A named set of regular expressions extracting a custom output field."""

    name: str
    part: Part = Part.RESPONSE
    regex: list[Pattern[str]] = field(default_factory=list)
    group: int = 0
    type: str = "regex"

    def __post_init__(self) -> None:
        self.part = Part(self.part)
        self.regex = [re.compile(item) if isinstance(item, str) else item for item in self.regex]
        if self.group < 0:
            raise ValueError("group must not be negative")


def parse_link_header(value: str) -> list[str]:
    """Return the URLs enclosed in angle brackets in a ``Link`` header."""
    return [target.strip() for target in _LINK_TARGET.findall(value) if target.strip()]


def parse_refresh(value: str) -> str:
    """Return the URL of a ``Refresh`` value such as ``5; url=/next``, or ``""``."""
    for part in value.split(";"):
        match = _REFRESH_URL.match(part)
        if match:
            return match.group(1).strip().strip("'\"")
    return ""


def _from_header(resp: Response, values: Iterable[str], attribute: str) -> list[Request]:
    return [
        new_navigation_request_url_from_response(value, resp.url or "", "header", attribute, resp)
        for value in values
    ]


def header_content_location_parser(resp: Response) -> list[Request]:
    """Extract the ``Content-Location`` header."""
    value = resp.header("Content-Location")
    return _from_header(resp, [value], "content-location") if value else []


def header_link_parser(resp: Response) -> list[Request]:
    """Extract every URL of the ``Link`` header."""
    value = resp.header("Link")
    return _from_header(resp, parse_link_header(value), "link") if value else []


def header_location_parser(resp: Response) -> list[Request]:
    """Extract the ``Location`` header."""
    value = resp.header("Location")
    return _from_header(resp, [value], "location") if value else []


def header_refresh_parser(resp: Response) -> list[Request]:
    """Extract the URL of the ``Refresh`` header."""
    value = resp.header("Refresh")
    if not value:
        return []
    target = parse_refresh(value)
    return _from_header(resp, [target], "refresh") if target else []


def _match_groups(pattern: Pattern[str], text: str) -> Iterable[tuple[str, ...]]:
    for match in pattern.finditer(text):
        yield (match.group(0),) + tuple(group or "" for group in match.groups())


def custom_field_regex_parser(
    resp: Response, custom_fields: Mapping[str, CustomFieldConfig]
) -> list[Request]:
    """Collect custom field values matched in the body and headers.

    Returns a single request carrying the fields, or nothing if none matched.
    """
    collected: dict[str, list[str]] = {}
    for config in custom_fields.values():
        results: list[str] = []
        for pattern in config.regex:
            matches: list[tuple[str, ...]] = []
            if config.part in (Part.BODY, Part.RESPONSE):
                matches.extend(_match_groups(pattern, resp.body))
            if config.part in (Part.HEADER, Part.RESPONSE):
                for key, value in resp.headers.items():
                    matches.extend(_match_groups(pattern, f"{key}: {value}"))
            results.extend(match[config.group] for match in matches if len(match) > config.group)
        if results:
            collected[config.name] = results
    if not collected:
        return []
    return [Request(method="GET", url=resp.url or "", depth=resp.depth, custom_fields=collected)]


class ResponseParser:
    """Runs every applicable parser over a response, in a fixed order."""

    def __init__(
        self,
        *,
        disable_redirects: bool = False,
        custom_fields: Mapping[str, CustomFieldConfig] | None = None,
    ) -> None:
        fields = dict(custom_fields or {})
        self._parsers: list[tuple[ParserKind, ParserFunc]] = [
            (ParserKind.HEADER, header_content_location_parser),
            (ParserKind.HEADER, header_link_parser),
            (ParserKind.HEADER, header_refresh_parser),
            (ParserKind.BODY, tags.body_a_tag_parser),
            (ParserKind.BODY, tags.body_link_href_tag_parser),
            (ParserKind.BODY, tags.body_background_tag_parser),
            (ParserKind.BODY, tags.body_audio_tag_parser),
            (ParserKind.BODY, tags.body_applet_tag_parser),
            (ParserKind.BODY, tags.body_img_tag_parser),
            (ParserKind.BODY, tags.body_object_tag_parser),
            (ParserKind.BODY, tags.body_svg_tag_parser),
            (ParserKind.BODY, tags.body_table_tag_parser),
            (ParserKind.BODY, tags.body_video_tag_parser),
            (ParserKind.BODY, tags.body_button_formaction_tag_parser),
            (ParserKind.BODY, tags.body_blockquote_cite_tag_parser),
            (ParserKind.BODY, tags.body_frame_src_tag_parser),
            (ParserKind.BODY, tags.body_map_area_ping_tag_parser),
            (ParserKind.BODY, tags.body_base_href_tag_parser),
            (ParserKind.BODY, tags.body_import_implementation_tag_parser),
            (ParserKind.BODY, tags.body_embed_tag_parser),
            (ParserKind.BODY, tags.body_frame_tag_parser),
            (ParserKind.BODY, tags.body_iframe_tag_parser),
            (ParserKind.BODY, tags.body_input_src_tag_parser),
            (ParserKind.BODY, tags.body_isindex_action_tag_parser),
            (ParserKind.BODY, tags.body_script_src_tag_parser),
            (ParserKind.BODY, tags.body_html_manifest_tag_parser),
            (ParserKind.BODY, tags.body_html_doctype_tag_parser),
            (ParserKind.BODY, tags.body_htmx_attr_parser),
            (ParserKind.BODY, lambda resp: custom_field_regex_parser(resp, fields)),
        ]
        if not disable_redirects:
            self._parsers.append((ParserKind.HEADER, header_location_parser))

    @staticmethod
    def _applies(kind: ParserKind, resp: Response) -> bool:
        if kind is ParserKind.HEADER:
            return resp.url is not None
        if kind is ParserKind.BODY:
            return resp.document is not None
        return bool(resp.body)

    def parse(self, resp: Response) -> list[Request]:
        """Return the requests found in ``resp`` by every applicable parser."""
        found: list[Request] = []
        for kind, func in self._parsers:
            if self._applies(kind, resp):
                found.extend(func(resp))
        return found