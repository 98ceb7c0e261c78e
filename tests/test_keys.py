import pytest

from enmime.textproto.keys import (
    canonical_email_mime_header_key,
    canonical_mime_header_key,
    valid_email_header_field_byte,
    valid_header_field_byte,
    valid_header_value_byte,
)

CANONICAL_CASES = [
    ("a-b-c", "A-B-C"),
    ("a-1-c", "A-1-C"),
    ("User-Agent", "User-Agent"),
    ("uSER-aGENT", "User-Agent"),
    ("user-agent", "User-Agent"),
    ("USER-AGENT", "User-Agent"),
    ("foo-bar_baz", "Foo-Bar_baz"),
    ("foo-bar$baz", "Foo-Bar$baz"),
    ("foo-bar~baz", "Foo-Bar~baz"),
    ("foo-bar*baz", "Foo-Bar*baz"),
    ("üser-agenT", "üser-agenT"),
    ("a B", "a B"),
    ("C Ontent-Transfer-Encoding", "C Ontent-Transfer-Encoding"),
    ("foo bar", "foo bar"),
]


@pytest.mark.parametrize("key, want", CANONICAL_CASES)
def test_canonical_mime_header_key(key, want):
    assert canonical_mime_header_key(key) == want


@pytest.mark.parametrize("key, want", CANONICAL_CASES)
def test_canonical_email_mime_header_key_shared_cases(key, want):
    assert canonical_email_mime_header_key(key) == want


@pytest.mark.parametrize(
    "key, want",
    [
        ("content-type", "Content-Type"),
        ("x-foo(bar)", "X-Foo(bar)"),
        ("x-a@b", "X-A@b"),
        ("x-a:b", "x-a:b"),
    ],
)
def test_canonical_email_key_accepts_more_characters(key, want):
    assert canonical_email_mime_header_key(key) == want


def test_mime_key_with_parenthesis_is_unchanged():
    assert canonical_mime_header_key("x-foo(bar)") == "x-foo(bar)"


def test_empty_key():
    assert canonical_mime_header_key("") == ""


@pytest.mark.parametrize(
    "c, want",
    [(ord("a"), True), (ord("-"), True), (ord("~"), True), (ord(" "), False),
     (ord(":"), False), (ord("("), False), (0xC3, False)],
)
def test_valid_header_field_byte(c, want):
    assert valid_header_field_byte(c) is want


@pytest.mark.parametrize(
    "c, want",
    [(ord("("), True), (ord('"'), True), (ord("@"), True), (ord(":"), False),
     (ord(" "), False), (0x7F, False), (0xC3, False)],
)
def test_valid_email_header_field_byte(c, want):
    assert valid_email_header_field_byte(c) is want


@pytest.mark.parametrize(
    "c, want",
    [(0x09, True), (0x20, True), (ord("a"), True), (0x80, True), (0xFF, True),
     (0x00, False), (0x0A, False), (0x0D, False), (0x7F, False)],
)
def test_valid_header_value_byte(c, want):
    assert valid_header_value_byte(c) is want