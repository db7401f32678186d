"""Tests for PHP name normalization and qualification."""

import pytest

from core.names import (
    NAMESPACE_SEPARATOR,
    is_fully_qualified,
    is_valid_qualified_name,
    normalize_php_name,
    qualify_name,
    split_qualified_name,
)


def test_separator_is_backslash() -> None:
    assert NAMESPACE_SEPARATOR == "\\"


def test_normalize_drops_whitespace() -> None:
    assert normalize_php_name(" App \\ Model\n\\User ") == "App\\Model\\User"


def test_qualify_with_namespace() -> None:
    assert qualify_name("Bar", "Foo") == "Foo\\Bar"
    assert qualify_name("Bar", "Foo\\Baz") == "Foo\\Baz\\Bar"


def test_qualify_without_namespace() -> None:
    assert qualify_name("Bar") == "Bar"
    assert qualify_name("Bar", None) == "Bar"
    assert qualify_name("Bar", "") == "Bar"


def test_fully_qualified_name_ignores_context() -> None:
    assert is_fully_qualified("\\Already\\There")
    assert qualify_name("\\Already\\There", "Ignored") == "Already\\There"


def test_qualify_strips_namespace_separators() -> None:
    assert qualify_name("Bar", "\\Foo\\") == "Foo\\Bar"


@pytest.mark.parametrize(
    "name",
    ["Foo", "Foo\\Bar", "_private", "Ünïcode\\Klasse", "A1\\B2", "\U0001d538Bar", "Emoji\\Ok\U0001f600"],
)
def test_valid_names(name: str) -> None:
    assert is_valid_qualified_name(name)


@pytest.mark.parametrize(
    "name",
    ["", "\\Foo", "Foo\\", "Foo\\\\Bar", "9Lives", "Foo-Bar", "Foo Bar"],
)
def test_invalid_names(name: str) -> None:
    assert not is_valid_qualified_name(name)


def test_split_qualified_name() -> None:
    assert split_qualified_name("A\\B\\C") == ("A\\B", "C")
    assert split_qualified_name("Solo") == ("", "Solo")
