import pytest

from enmime.stringutil.find import find_unquoted


@pytest.mark.parametrize(
    "text, want",
    [
        ("", []),
        (";", [0]),
        ("\\;", [1]),
        ("a;b", [1]),
        ("a\\;b;c", [2, 4]),
        ("\\", []),
        ("\\\\;", [2]),
        ('"', []),
        ('a";b"', []),
        ('"a"";b"', []),
        ('a\\";b"', [3]),
        ('"a;b;c;d', [2, 4, 6]),
        ('a"', []),
        ('ab";c', [3]),
        ('"a;b""c;d', [7]),
        ('a"b\\";\\"c";d', [10]),
        ('a;"b";""', [1, 5]),
    ],
)
def test_find_unquoted(text, want):
    assert find_unquoted(text, ";", '"') == want