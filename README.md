# spidertrail

spidertrail is the discovery half of a web crawler. You give it a fetched page,
meaning its status, headers, body and the URL it came from. It returns the
navigation requests a crawler should follow next. Relative links are resolved
against the page URL and fragments are dropped. Every request records the tag
and attribute it was found in.

## Installation

```
pip install spidertrail
```

To run the test suite as well:

```
pip install "spidertrail[test]"
pytest
```

## What is in the package

### `spidertrail.navigation`

This module holds the data model that the rest of the package shares.

- `Request` is a navigation request. It holds the method, endpoint URL, body,
  headers and depth, and the tag, attribute and source page the link came from.
  - `Request.request_url()` returns the key used to tell requests apart. For
    `GET` this is the URL. For `POST` it is `url:body`. For any other method it
    is an empty string.
  - `Request.to_dict()` returns the serialisable fields and leaves out empty
    ones.
- `Response` is a fetched page. Its `url` is the URL of the request that
  produced it. Its `document` is the parsed HTML, or `None`.
  - `Response.absolute_url(path)` resolves a link against the page URL and
    removes any fragment. A path that starts with `#` gives an empty string.
  - `Response.is_redirect()` is true for status codes 300 to 399.
  - `Response.header(name)` looks up a header regardless of case.
  - `Response.to_dict()` serialises the response with header names in lower
    case.
- `Form` describes an HTML form: its method, action, enctype and parameters.
- `new_navigation_request_url_from_response(path, source, tag, attribute, resp)`
  builds a `GET` request for a link found on a page. The new request takes the
  depth and root hostname of the page.
- `OutOfScopeError` is the error for endpoints outside the crawl scope.

### `spidertrail.tags`

This module has one parser for each HTML construct. Each parser takes a
`Response` whose `document` was built by `parse_document(html)` and returns a
list of `Request` objects. If the response has no document, the parser returns
an empty list. The parsers cover:

- anchors (`href`, `ping`), `link`, `base` and image-map `area` pings
- `img` `dynsrc`, `longdesc`, `lowsrc`, `src` and `srcset`. An image whose
  `src` is a `data:` URI contributes no `src` or `srcset` entries.
- `audio` with its `source` `src` and `srcset`
- `video` with its `track` elements
- `embed`, `object` with its `param` values, and `applet` `archive` and
  `codebase`
- `frame` and `iframe` `src`, and `svg` `image` and `script` `href`, including
  `xlink:href`
- `table` and `td` backgrounds, `body` backgrounds and `blockquote` citations
- `button` `formaction`, image `input` `src` and `isindex` `action`
- the `html` `manifest` attribute, the `SYSTEM` identifier of a leading
  doctype, and `import` `implementation`
- htmx attributes: `hx-get`, `hx-post`, `hx-put` and `hx-patch`, each giving a
  request with the matching method

`parse_document(html)` parses markup with Beautiful Soup's built-in
`html.parser`. `parse_srcset(value)` returns the URLs of the candidates in a
`srcset` attribute.

### `spidertrail.parser`

- There are header parsers for `Content-Location`, `Link`, `Location` and
  `Refresh`. They use two helpers:
  - `parse_link_header(value)` returns the URLs in angle brackets.
  - `parse_refresh(value)` returns the `url=` target.
- `custom_field_regex_parser(resp, custom_fields)` runs user-defined regular
  expressions over the body, the headers, or both. Each field is described by a
  `CustomFieldConfig`, which holds a name, a `Part`, the regular expressions and
  a capture group. The parser returns a single request that carries the matched
  values in `custom_fields`, or nothing if no expression matched.
- `ResponseParser(disable_redirects=False, custom_fields=None)` runs every
  applicable parser in a fixed order. `ResponseParser.parse(resp)` returns all
  the requests found. Which parsers apply is set by `ParserKind`:
  - Header parsers need a response URL.
  - Body parsers need a parsed document.
  - The `Location` header parser is left out when `disable_redirects` is true.

### `spidertrail.known_files`

`KnownFiles(files, fetch=http_fetch)` fetches known files from a site root and
turns their entries into requests:

- `robots.txt`: the `Allow` and `Disallow` entries
- `sitemap.xml`: the `<url>` and `<sitemap>` locations

Pass `"robotstxt"` or `"sitemapxml"` as `files` to fetch only one of them. Any
other value fetches both.

`RobotsTxtCrawler` and `SitemapXmlCrawler` do the work and can also be used on
their own. Their `parse(text, fetched)` methods work on a `FetchedFile` you
already have, which is useful offline or in tests.

`http_fetch(url)` is the default fetcher. It uses `urllib` and returns error
statuses like any other response.

A failed fetch or unreadable XML raises `KnownFileError`. Its `partial`
attribute holds the requests gathered before the failure.

### `spidertrail.maze_score`

This module scores crawler output against the expected endpoints of the
security crawl maze test bed.

- `read_found_links(path)` reads the paths of `.found` links from an output
  file. It stops at the first empty line.
- `stripped_link(link)` returns the path of a URL.
- `score(links, links_headless)` returns a `ScoreReport` with per-endpoint
  matches, totals and percentage scores. `ScoreReport.lines()` gives its
  printable form.
- `colorize_text(text, value)` gives `text:yes` in green or `text:no` in red.
- `compare_output(got, expected)` checks that two result lists are equal,
  element by element.

## Command line

To compare the output of a standard crawl and a headless crawl of the crawl
maze, run:

```
spidertrail-maze-score output.txt output_headless.txt
```

For each crawl, every expected endpoint is printed with `yes` or `no`. The
totals and a percentage score for each crawl follow.

## What it does not do

spidertrail finds endpoints. It does not crawl. It has none of the following:

- a request queue
- a concurrent fetching loop
- scope or deduplication filtering
- rate limiting
- headless-browser crawling
- an output writer
- a crawler command

Apart from the known-file fetcher, you fetch the pages yourself and pass them
in as `Response` objects.