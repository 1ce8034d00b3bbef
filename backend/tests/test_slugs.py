"""Tests for title -> slug derivation."""

import pytest

from newsroom.articles.service import derive_slug
from newsroom.articles.slugs import slugify
from newsroom.exceptions import InvalidInput


def test_basic_title():
    assert slugify("My First Post") == "my-first-post"


def test_accents_are_ascii_normalized():
    assert slugify("Ça va, São Paulo?") == "ca-va-sao-paulo"


def test_punctuation_and_repeated_separators_collapse():
    assert slugify("  Hello --- World!!  ") == "hello-world"
    assert slugify("snake_case title") == "snake-case-title"


def test_different_titles_can_share_a_slug():
    # 서로 다른 제목이 같은 slug 로 수렴할 수 있음 (유일성은 저장 시점에 판정)
    assert slugify("Hello World") == slugify("hello, world!")


def test_derive_slug_rejects_titles_without_letters_or_digits():
    with pytest.raises(InvalidInput):
        derive_slug("!!!")
