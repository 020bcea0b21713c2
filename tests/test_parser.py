import re

import pytest

from spidertrail.navigation import Response
from spidertrail.parser import (
    CustomFieldConfig,
    Part,
    ResponseParser,
    custom_field_regex_parser,
    header_content_location_parser,
    header_link_parser,
    header_location_parser,
    header_refresh_parser,
    parse_link_header,
    parse_refresh,
)
from spidertrail.tags import parse_document

HEADERS_URL = "https://security-crawl-maze.app/headers/xyz/"
CONTACT_URL = "https://security-crawl-maze.app/contact"
EMAIL_REGEX = r"([a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9_-]+)"


def test_content_location():
    resp = Response(url=HEADERS_URL, headers={"Content-Location": "/test/headers/content-location.found"})
    found = header_content_location_parser(resp)
    assert found[0].url == "https://security-crawl-maze.app/test/headers/content-location.found"
    assert (found[0].tag, found[0].attribute) == ("header", "content-location")


def test_link():
    resp = Response(url=HEADERS_URL, headers={"Link": '</test/headers/link.found>; rel="preload"'})
    found = header_link_parser(resp)
    assert found[0].url == "https://security-crawl-maze.app/test/headers/link.found"


def test_location():
    resp = Response(url=HEADERS_URL, headers={"Location": "http://security-crawl-maze.app/test/headers/location.found"})
    found = header_location_parser(resp)
    assert found[0].url == "http://security-crawl-maze.app/test/headers/location.found"


def test_refresh():
    resp = Response(url=HEADERS_URL, headers={"Refresh": "999; url=/test/headers/refresh.found"})
    found = header_refresh_parser(resp)
    assert found[0].url == "https://security-crawl-maze.app/test/headers/refresh.found"


def test_missing_headers_give_nothing():
    resp = Response(url=HEADERS_URL)
    assert header_content_location_parser(resp) == []
    assert header_link_parser(resp) == []
    assert header_location_parser(resp) == []
    assert header_refresh_parser(resp) == []


def test_header_lookup_is_case_insensitive():
    resp = Response(url=HEADERS_URL, headers={"location": "/next"})
    assert [r.url for r in header_location_parser(resp)] == ["https://security-crawl-maze.app/next"]


def test_parse_link_header_multiple():
    value = '</a>; rel="preload", </b>; rel="next"'
    assert parse_link_header(value) == ["/a", "/b"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("999; url=/x", "/x"),
        ("0;URL='/quoted'", "/quoted"),
        ("5", ""),
    ],
)
def test_parse_refresh(value, expected):
    assert parse_refresh(value) == expected


def test_refresh_without_url_gives_nothing():
    resp = Response(url=HEADERS_URL, headers={"Refresh": "10"})
    assert header_refresh_parser(resp) == []


def test_regex_body():
    resp = Response(url=CONTACT_URL, depth=0, body="some content contact@example.com")
    fields = {"email": CustomFieldConfig(name="email", part="body", regex=[re.compile(EMAIL_REGEX)])}
    found = custom_field_regex_parser(resp, fields)
    assert found[0].custom_fields == {"email": ["contact@example.com"]}
    assert found[0].url == CONTACT_URL
    assert found[0].method == "GET"


def test_regex_header():
    resp = Response(url=CONTACT_URL, headers={"server": "ECS (dcb/7F84)"})
    fields = {"server": CustomFieldConfig(name="server", part=Part.HEADER, regex=[re.compile("server: ECS")])}
    found = custom_field_regex_parser(resp, fields)
    assert found[0].custom_fields == {"server": ["server: ECS"]}


def test_regex_response():
    resp = Response(
        url=CONTACT_URL,
        headers={"server": "ECS (dcb/7F84)"},
        body="some content contact@example.com",
    )
    fields = {
        "server": CustomFieldConfig(name="server", part="response", regex=[re.compile("ECS")]),
        "email": CustomFieldConfig(name="email", part="response", regex=[re.compile(EMAIL_REGEX)]),
    }
    found = custom_field_regex_parser(resp, fields)
    assert found[0].custom_fields == {"server": ["ECS"], "email": ["contact@example.com"]}


def test_regex_group_selection():
    resp = Response(url=CONTACT_URL, body="mail alice@example.com")
    fields = {"user": CustomFieldConfig(name="user", part="body", regex=[r"(\w+)@example\.com"], group=1)}
    assert custom_field_regex_parser(resp, fields)[0].custom_fields == {"user": ["alice"]}


def test_regex_group_out_of_range_gives_nothing():
    resp = Response(url=CONTACT_URL, body="mail alice@example.com")
    fields = {"user": CustomFieldConfig(name="user", part="body", regex=[r"(\w+)@example\.com"], group=2)}
    assert custom_field_regex_parser(resp, fields) == []


def test_header_part_ignores_body():
    resp = Response(url=CONTACT_URL, body="ECS in body")
    fields = {"server": CustomFieldConfig(name="server", part="header", regex=["ECS"])}
    assert custom_field_regex_parser(resp, fields) == []


def test_invalid_part_rejected():
    with pytest.raises(ValueError):
        CustomFieldConfig(name="x", part="cookie")


def _full_response():
    return Response(
        url="https://example.com/dir/",
        headers={"Content-Location": "/cl", "Location": "/next"},
        document=parse_document('<a href="/a">x</a>'),
    )


def test_response_parser_order():
    found = ResponseParser().parse(_full_response())
    assert [r.url for r in found] == [
        "https://example.com/cl",
        "https://example.com/a",
        "https://example.com/next",
    ]


def test_response_parser_disable_redirects_skips_location():
    found = ResponseParser(disable_redirects=True).parse(_full_response())
    assert [r.url for r in found] == ["https://example.com/cl", "https://example.com/a"]


def test_response_parser_without_document_runs_headers_only():
    resp = Response(url="https://example.com/", headers={"Location": "/next"}, body="<a href='/a'>")
    found = ResponseParser().parse(resp)
    assert [r.url for r in found] == ["https://example.com/next"]


def test_response_parser_without_exchange_gives_nothing():
    assert ResponseParser().parse(Response()) == []


def test_response_parser_custom_fields():
    resp = Response(
        url="https://example.com/",
        body="write to contact@example.com",
        document=parse_document("<p>write to contact@example.com</p>"),
    )
    fields = {"email": CustomFieldConfig(name="email", part="body", regex=[EMAIL_REGEX])}
    found = ResponseParser(custom_fields=fields).parse(resp)
    assert [r.custom_fields for r in found if r.custom_fields] == [{"email": ["contact@example.com"]}]