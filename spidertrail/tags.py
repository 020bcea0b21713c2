"""Endpoint extraction from HTML tags and attributes of a response body."""

from __future__ import annotations

import re
from collections.abc import Iterable

from bs4 import BeautifulSoup
from bs4.element import Doctype, Tag

from .navigation import Request, Response, new_navigation_request_url_from_response

_SRCSET_CANDIDATE = re.compile(r"[\s,]*(\S+?)(?:,+(?=\s|$)|\s+[^,]*,?|$)")
_DOCTYPE_SYSTEM = re.compile(r"^\s*\S+\s+SYSTEM\s+([\"'])(.*?)\1", re.IGNORECASE | re.DOTALL)
_HTMX_METHODS = (
    ("hx-get", "GET"),
    ("hx-post", "POST"),
    ("hx-put", "PUT"),
    ("hx-patch", "PATCH"),
)


def parse_document(html: str) -> BeautifulSoup:
    """Parse ``html`` into a document the tag parsers can search."""
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


def parse_srcset(value: str) -> list[str]:
    """Return the URLs of the image candidates in a ``srcset`` value."""
    return [match.group(1) for match in _SRCSET_CANDIDATE.finditer(value) if match.group(1)]


def _elements(root, name: str) -> list[Tag]:
    if root is None:
        return []
    return root.find_all(name)


def _attr(element: Tag, key: str) -> str:
    """Return the first attribute named ``key``, ignoring any namespace prefix."""
    for name, value in element.attrs.items():
        if name == key or name.rpartition(":")[2] == key:
            return value if isinstance(value, str) else " ".join(value)
    return ""


def _link(resp: Response, value: str, tag: str, attribute: str) -> Request:
    return new_navigation_request_url_from_response(value, resp.url or "", tag, attribute, resp)


def _from_attribute(resp: Response, element_name: str, attr: str, tag: str, attribute: str) -> list[Request]:
    return [
        _link(resp, value, tag, attribute)
        for element in _elements(resp.document, element_name)
        if (value := _attr(element, attr))
    ]


def _from_attributes(
    resp: Response, element: Tag, pairs: Iterable[tuple[str, str, str]]
) -> list[Request]:
    return [
        _link(resp, value, tag, attribute)
        for attr, tag, attribute in pairs
        if (value := _attr(element, attr))
    ]


def body_a_tag_parser(resp: Response) -> list[Request]:
    """Extract ``href`` and ``ping`` of anchors."""
    found: list[Request] = []
    for element in _elements(resp.document, "a"):
        found += _from_attributes(resp, element, [("href", "a", "href"), ("ping", "a", "ping")])
    return found


def body_link_href_tag_parser(resp: Response) -> list[Request]:
    """Extract ``href`` of link elements."""
    return _from_attribute(resp, "link", "href", "link", "href")


def body_background_tag_parser(resp: Response) -> list[Request]:
    """Extract the ``background`` of the body element."""
    return _from_attribute(resp, "body", "background", "body", "background")


def body_audio_tag_parser(resp: Response) -> list[Request]:
    """Extract audio ``src`` and the ``src`` and ``srcset`` of its sources."""
    found: list[Request] = []
    for element in _elements(resp.document, "audio"):
        found += _from_attributes(resp, element, [("src", "audio", "src")])
        for source in _elements(element, "source"):
            found += _from_attributes(resp, source, [("src", "audio", "source")])
            found += [
                _link(resp, value, "audio", "sourcesrcset")
                for value in parse_srcset(_attr(source, "srcset"))
            ]
    return found


def body_applet_tag_parser(resp: Response) -> list[Request]:
    """Extract ``archive`` and ``codebase`` of applets."""
    found: list[Request] = []
    for element in _elements(resp.document, "applet"):
        found += _from_attributes(
            resp, element, [("archive", "applet", "archive"), ("codebase", "applet", "codebase")]
        )
    return found


def body_img_tag_parser(resp: Response) -> list[Request]:
    """Extract the link attributes of images.

    An image whose ``src`` is a data URI contributes nothing after its
    ``dynsrc``, ``longdesc`` and ``lowsrc``.
    """
    found: list[Request] = []
    for element in _elements(resp.document, "img"):
        found += _from_attributes(
            resp,
            element,
            [("dynsrc", "img", "dynsrc"), ("longdesc", "img", "longdesc"), ("lowsrc", "img", "lowsrc")],
        )
        src = _attr(element, "src")
        if src and src != "#":
            if src.startswith("data:"):
                continue
            found.append(_link(resp, src, "img", "src"))
        found += [_link(resp, value, "img", "srcset") for value in parse_srcset(_attr(element, "srcset"))]
    return found


def body_object_tag_parser(resp: Response) -> list[Request]:
    """Extract ``data`` and ``codebase`` of objects and ``value`` of their params."""
    found: list[Request] = []
    for element in _elements(resp.document, "object"):
        found += _from_attributes(resp, element, [("data", "src", "data"), ("codebase", "src", "codebase")])
        for param in _elements(element, "param"):
            found += _from_attributes(resp, param, [("value", "src", "value")])
    return found


def body_svg_tag_parser(resp: Response) -> list[Request]:
    """Extract ``href`` of images and scripts inside SVG elements."""
    found: list[Request] = []
    for element in _elements(resp.document, "svg"):
        for image in _elements(element, "image"):
            found += _from_attributes(resp, image, [("href", "svg", "image-href")])
        for script in _elements(element, "script"):
            found += _from_attributes(resp, script, [("href", "svg", "script-href")])
    return found


def body_table_tag_parser(resp: Response) -> list[Request]:
    """Extract ``background`` of tables and of their cells."""
    found: list[Request] = []
    for element in _elements(resp.document, "table"):
        found += _from_attributes(resp, element, [("background", "table", "background")])
        for cell in _elements(element, "td"):
            found += _from_attributes(resp, cell, [("background", "table", "td-background")])
    return found


def body_video_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` and ``poster`` of videos and ``src`` of their tracks."""
    found: list[Request] = []
    for element in _elements(resp.document, "video"):
        found += _from_attributes(resp, element, [("src", "video", "src"), ("poster", "video", "poster")])
        for track in _elements(element, "track"):
            found += _from_attributes(resp, track, [("src", "video", "track-src")])
    return found


def body_button_formaction_tag_parser(resp: Response) -> list[Request]:
    """Extract ``formaction`` of buttons."""
    return _from_attribute(resp, "button", "formaction", "button", "formaction")


def body_blockquote_cite_tag_parser(resp: Response) -> list[Request]:
    """Extract ``cite`` of blockquotes."""
    return _from_attribute(resp, "blockquote", "cite", "blockquote", "cite")


def body_frame_src_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` of frames."""
    return _from_attribute(resp, "frame", "src", "frame", "src")


def body_map_area_ping_tag_parser(resp: Response) -> list[Request]:
    """Extract ``ping`` of image map areas."""
    return _from_attribute(resp, "area", "ping", "area", "ping")


def body_base_href_tag_parser(resp: Response) -> list[Request]:
    """Extract ``href`` of base elements."""
    return _from_attribute(resp, "base", "href", "base", "href")


def body_import_implementation_tag_parser(resp: Response) -> list[Request]:
    """Extract ``implementation`` of import elements."""
    return _from_attribute(resp, "import", "implementation", "import", "implementation")


def body_embed_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` of embeds."""
    return _from_attribute(resp, "embed", "src", "embed", "src")


def body_frame_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` of frames."""
    return _from_attribute(resp, "frame", "src", "frame", "src")


def body_iframe_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` of inline frames."""
    return _from_attribute(resp, "iframe", "src", "iframe", "src")


def body_input_src_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` of image inputs; the type is matched case-insensitively."""
    return [
        _link(resp, value, "input-image", "src")
        for element in _elements(resp.document, "input")
        if _attr(element, "type").lower() == "image" and (value := _attr(element, "src"))
    ]


def body_isindex_action_tag_parser(resp: Response) -> list[Request]:
    """Extract ``action`` of isindex elements."""
    return _from_attribute(resp, "isindex", "action", "isindex", "action")


def body_script_src_tag_parser(resp: Response) -> list[Request]:
    """Extract ``src`` of scripts."""
    return _from_attribute(resp, "script", "src", "script", "src")


def body_html_manifest_tag_parser(resp: Response) -> list[Request]:
    """Extract ``manifest`` of the html element."""
    return _from_attribute(resp, "html", "manifest", "html", "manifest")


def body_html_doctype_tag_parser(resp: Response) -> list[Request]:
    """Extract the system identifier of a leading doctype without a public one."""
    if resp.document is None:
        return []
    first = next(
        (node for node in resp.document.contents if not (isinstance(node, str) and not node.strip()) or isinstance(node, Doctype)),
        None,
    )
    if not isinstance(first, Doctype):
        return []
    match = _DOCTYPE_SYSTEM.match(str(first))
    if match is None:
        return []
    return [_link(resp, match.group(2), "html", "doctype")]


def body_htmx_attr_parser(resp: Response) -> list[Request]:
    """Extract requests from htmx ``hx-get``, ``hx-post``, ``hx-put`` and ``hx-patch``."""
    if resp.document is None:
        return []
    found: list[Request] = []
    for element in resp.document.find_all(True):
        for attr, method in _HTMX_METHODS:
            value = _attr(element, attr)
            if not value:
                continue
            found.append(
                Request(
                    method=method,
                    url=resp.absolute_url(value),
                    attribute=attr,
                    tag="htmx",
                    root_hostname=resp.root_hostname,
                    depth=resp.depth,
                    source=resp.url or "",
                )
            )
    return found