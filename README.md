# enmime

Building blocks for reading and writing MIME e-mail in Python. The package
has no dependencies outside the standard library.

## What is inside

### `enmime.match`

Searches over a tree of MIME parts. A part is any object with `parent`,
`first_child` and `next_sibling` attributes, each holding another part or
`None`.

- `breadth_match_first(part, matcher)` / `breadth_match_all(part, matcher)`
- `depth_match_first(part, matcher)` / `depth_match_all(part, matcher)`

The `_first` functions return the first matching part or `None`; the `_all`
functions return a list.

### `enmime.coding`

- `charsets`: `lookup_charset(label)` returns a `Charset` (canonical `name`,
  `decode(data)`, `new_decoder()`); `convert_to_utf8_string(charset, data)`
  decodes bytes to a string; `new_charset_reader(charset, stream)` wraps a
  binary stream so that reading it yields UTF-8 bytes;
  `find_charset_in_html(html)` returns the charset named in a `<meta>` tag,
  or `""`. Unknown labels raise `UnsupportedCharsetError` (a `ValueError`).
- `headerext`: `decode_ext_header(value)` decodes RFC 2047 encoded words
  with the extended charset table, returning the input unchanged when
  decoding fails; `rfc2047_decode(s)` decodes repeatedly for nested
  encodings and quotes the value of a `key=value` result.
- `quotedprint`: `QPCleaner(stream)` escapes bare `=` signs as `=3D` and
  bytes outside printable ASCII as `=XX`, and inserts soft line breaks so
  that lines stay within `MAX_QP_LINE_LEN` (1024) bytes. `read(size)`
  returns an empty result at the end of input.
- `base64clean`: `Base64Cleaner(stream)` passes on only base64 alphabet
  bytes; whitespace and `=` are dropped silently, other stray bytes are
  dropped and recorded as `ValueError`s in its `errors` list.
- `idheader`: `from_id_header(v)` and `to_id_header(v)` for Content-ID and
  Message-ID values.

### `enmime.stringutil`

- `find.find_unquoted`, `split.split_unquoted`, `split.split_after_unquoted`:
  find or split on a character outside quoted runs.
- `wrap.wrap(max_len, *parts)`: fold text on spaces or tabs with CRLF and a
  space, returning bytes.
- `addr.Address`, `addr.join_address(addrs)` for To/Cc header values, and
  `addr.ensure_comma_delimited_addresses(s)` to insert missing commas
  between addresses.
- `randsource.LockedSource` / `new_locked_source(seed)`: a seeded,
  thread-safe random source; `uuidgen.random_uuid(source=None)` returns a
  version 4 UUID string.

### `enmime.textproto`

- `reader.Reader(stream, max_header_bytes=None)`: `read_line`,
  `read_continued_line`, `read_code_line`, `read_response`, `dot_reader`,
  `read_dot_bytes`, `read_dot_lines`, `read_mime_header` and
  `read_email_mime_header` (which accepts the wider key characters of
  e-mail and any bytes in values). Raises `EOFError`, `errors.ProtocolError`,
  `errors.ResponseError` or `reader.MessageTooLargeError`.
- `header.MIMEHeader`: maps canonical keys to lists of values, with `add`,
  `set`, `get`, `values` and `delete`.
- `keys`: `canonical_mime_header_key`, `canonical_email_mime_header_key` and
  byte validity checks.
- `writer.Writer(stream)`: `printf_line(format, *args)` and `dot_writer()`,
  whose `DotWriter` escapes leading dots and ends the block on `close()`
  (it is also a context manager).
- `pipeline.Pipeline`: orders pipelined requests and responses between
  threads.
- `conn.Conn(stream)` bundles a reader, a writer and a pipeline; `cmd` sends
  a command line and returns its pipeline id. `conn.dial(network, addr)`
  connects over `tcp`, `tcp4`, `tcp6` or `unix`.
- `errors.trim_string` and `errors.trim_bytes` strip ASCII whitespace.

## Examples

```python
from enmime.coding.headerext import decode_ext_header
from enmime.coding.idheader import to_id_header, from_id_header
from enmime.stringutil.split import split_unquoted

decode_ext_header("=?US-ASCII?Q?Keith_Moore?=")   # 'Keith Moore'
to_id_header("foo bar")                            # '<foo+bar>'
from_id_header("<foo%25bar>")                      # 'foo%bar'
split_unquoted('a;"b;c";d', ";", '"')              # ['a', '"b;c"', 'd']
```

Reading a header block:

```python
import io
from enmime.textproto.reader import Reader

reader = Reader(io.BytesIO(b"To: someone@example.com\r\nSubject: hi\r\n\r\n"))
header = reader.read_email_mime_header()
header.get("subject")  # 'hi'
```

## What it does not do

This package does not parse whole messages into a part tree or build
messages: there is no envelope or part type. The functions in
`enmime.match` search trees of objects you provide, and the coding and
text-protocol modules are the pieces such a parser would use. There is no
command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```