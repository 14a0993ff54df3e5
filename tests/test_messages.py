"""Tests for validation message formatting."""

import pytest

from storefront.schemas.messages import first_validation_message, format_validation_error


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        ({"type": "missing", "loc": ("body", "name")}, '"name" is required'),
        (
            {"type": "string_too_short", "loc": ("name",), "ctx": {"min_length": 1}},
            '"name" is not allowed to be empty',
        ),
        (
            {"type": "string_too_short", "loc": ("name",), "ctx": {"min_length": 3}},
            '"name" length must be at least 3 characters long',
        ),
        (
            {"type": "string_too_long", "loc": ("name",), "ctx": {"max_length": 255}},
            '"name" length must be less than or equal to 255 characters long',
        ),
        ({"type": "string_type", "loc": ("name",)}, '"name" must be a string'),
        ({"type": "int_parsing", "loc": ("path", "category_id")}, '"category_id" must be a valid integer'),
        (
            {"type": "greater_than_equal", "loc": ("query", "offset"), "ctx": {"ge": 0}},
            '"offset" must be greater than or equal to 0',
        ),
        (
            {"type": "less_than_equal", "loc": ("query", "limit"), "ctx": {"le": 100}},
            '"limit" must be less than or equal to 100',
        ),
        ({"type": "value_error", "loc": ("body", 0), "msg": "Value error, nope"}, '"body" value error, nope'),
    ],
)
def test_format_validation_error(error, expected):
    assert format_validation_error(error) == expected


def test_field_name_falls_back_when_location_has_no_name():
    assert format_validation_error({"type": "missing", "loc": (0,)}) == '"value" is required'


def test_first_validation_message_uses_first_error():
    errors = [
        {"type": "missing", "loc": ("name",)},
        {"type": "string_type", "loc": ("image",)},
    ]

    assert first_validation_message(errors) == '"name" is required'
    assert first_validation_message([]) == '"value" is invalid'
