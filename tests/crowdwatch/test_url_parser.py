import pytest

from crowdwatch.url_parser import embed_url, parse_stream_url


@pytest.mark.parametrize("url,expected", [
    ("https://youtu.be/abc123", "abc123"),
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ("https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    ("youtube.com/watch?v=a-b_c", "a-b_c"),
    ("https://www.youtube.com/embed/XyZ987", "XyZ987"),
    ("https://www.youtube.com/v/legacy01", "legacy01"),
    ("  https://youtu.be/abc123?t=42  ", "abc123"),
])
def test_recognized_shapes(url, expected):
    assert parse_stream_url(url) == expected


@pytest.mark.parametrize("url", [
    "https://example.com/video",
    "https://youtu.be/",
    "https://www.youtube.com/watch?list=PL123",
    "",
    "   ",
    "not a url",
])
def test_unrecognized_is_invalid(url):
    assert parse_stream_url(url) is None


def test_embed_url():
    assert embed_url("abc123").startswith("https://www.youtube.com/embed/abc123")
