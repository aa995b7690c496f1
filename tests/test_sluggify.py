import re

import pytest

from csmigrate.text import sluggify


SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def test_punctuation_collapses_to_single_hyphens():
    assert sluggify("Hello, World!") == "hello-world"
    assert sluggify("  --Already   spaced--  ") == "already-spaced"


def test_non_ascii_is_transliterated():
    assert sluggify("Café Crème") == "cafe-creme"
    assert sluggify("Über größe") == "uber-grosse"


def test_apostrophes_split_words():
    assert sluggify("Don't stop") == "don-t-stop"


@pytest.mark.parametrize(
    "title",
    ["Hello, World!", "Ünïcödé & friends", "  a__b..c  ", "2020: A Year", "x"],
)
def test_output_is_a_fixed_point(title):
    slug = sluggify(title)
    assert SLUG_RE.match(slug)
    assert sluggify(slug) == slug


def test_empty_title_gives_empty_slug():
    assert sluggify("") == ""
    assert sluggify("!!!") == ""
