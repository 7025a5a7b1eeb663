"""Tests for formatting helpers."""

import pytest

from memsentinel.utils import format_bytes, format_duration, parse_size


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0.00 B"),
        (512, "512.00 B"),
        (1536, "1.50 KB"),
        (5 * 1024 * 1024, "5.00 MB"),
        (-2048, "-2.00 KB"),
        ("nope", "0.00 B"),
        (True, "0.00 B"),
    ],
)
def test_format_bytes(value, expected):
    assert format_bytes(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (250, "250ms"),
        (45_000, "45s"),
        (185_000, "3m 5s"),
        (3_723_000, "1h 2m 3s"),
        (-5, "0ms"),
        (None, "0ms"),
    ],
)
def test_format_duration(value, expected):
    assert format_duration(value) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("512", 512),
        ("1KB", 1024),
        ("1.5 MB", int(1.5 * 1024 * 1024)),
        ("2gb", 2 * 1024**3),
    ],
)
def test_parse_size(text, expected):
    assert parse_size(text) == expected


def test_parse_size_rejects_garbage():
    with pytest.raises(ValueError):
        parse_size("lots")
