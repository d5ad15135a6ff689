import pytest

from chanchat.validation import trim


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  hello  ", "hello"),
        ("\t\r\nhello world\r\n", "hello world"),
        ("\x0b\x0cword\x0c", "word"),
        ("a  b", "a  b"),
        ("", ""),
        (" \t\r\n ", ""),
    ],
)
def test_trim_strips_ascii_whitespace(raw, expected):
    assert trim(raw) == expected


def test_trim_keeps_non_ascii_spaces():
    assert trim("\xa0x\xa0") == "\xa0x\xa0"


@pytest.mark.parametrize("raw", ["  x ", "\tabc\n", "plain", "   "])
def test_trim_is_idempotent(raw):
    once = trim(raw)
    assert trim(once) == once
    assert raw.find(once) >= 0