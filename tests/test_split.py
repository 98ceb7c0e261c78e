import pytest

from enmime.stringutil.split import split_after_unquoted, split_unquoted


@pytest.mark.parametrize(
    "text, want",
    [
        ("", [""]),
        (";", ["", ""]),
        ('"', ['"']),
        ("a;b", ["a", "b"]),
        ("a;b;", ["a", "b", ""]),
        ("a;b;c", ["a", "b", "c"]),
        ('a;"b;c";d', ["a", '"b;c"', "d"]),
        ('"a;b;c;d', ['"a', "b", "c", "d"]),
        ('"a;b";"c;d', ['"a;b"', '"c', "d"]),
        ('a;"b\\";\\"c";d', ["a", '"b\\";\\"c"', "d"]),
        ('a;"b";""', ["a", '"b"', '""']),
    ],
)
def test_split_unquoted(text, want):
    assert split_unquoted(text, ";", '"') == want


@pytest.mark.parametrize(
    "text, want",
    [
        ("", [""]),
        (";", [";", ""]),
        ('"', ['"']),
        ("a;b", ["a;", "b"]),
        ("a;b;", ["a;", "b;", ""]),
        ("a;b;c", ["a;", "b;", "c"]),
        ('a;"b;c";d', ["a;", '"b;c";', "d"]),
        ('"a;b;c;d', ['"a;', "b;", "c;", "d"]),
        ('"a;b";"c;d', ['"a;b";', '"c;', "d"]),
        ('a;"b\\";\\"c";d', ["a;", '"b\\";\\"c";', "d"]),
        ("a;b\\;c", ["a;", "b\\;", "c"]),
        ('a;"b";""', ["a;", '"b";', '""']),
    ],
)
def test_split_after_unquoted(text, want):
    assert split_after_unquoted(text, ";", '"') == want


def test_split_after_rejoins_to_input():
    text = 'x;"y;z";w;'
    assert "".join(split_after_unquoted(text, ";", '"')) == text