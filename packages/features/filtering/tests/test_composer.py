"""Tests for compose_sorter / compose_filter / compose_filter_numeric."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from godbms_core import ValidationError
from godbms_filtering import (
    DEFAULT_SORTER,
    FieldNotAllowedError,
    FilterParseError,
    compose_filter,
    compose_filter_numeric,
    compose_sorter,
    date,
    identity,
    numeric,
)

EPOCH_MS = 1653340079100
EPOCH_DT = datetime(2022, 5, 23, 21, 7, 59, 100000, tzinfo=timezone.utc)


class TestComposeSorter:
    def test_empty_input_yields_default(self) -> None:
        assert compose_sorter({}, ["age"]) == {"createdAt": "desc"}
        assert compose_sorter(None) == {"createdAt": "desc"}

    def test_default_is_a_copy(self) -> None:
        result = compose_sorter(None)
        result["age"] = "asc"
        assert DEFAULT_SORTER == {"createdAt": "desc"}

    def test_keeps_only_allowed_in_allow_list_order(self) -> None:
        result = compose_sorter(
            {"name": "asc", "password": "desc", "age": "desc"}, ["age", "name"]
        )
        assert list(result.items()) == [("age", "desc"), ("name", "asc")]

    def test_allow_list_defaults_to_default_sort_fields(self) -> None:
        assert compose_sorter({"createdAt": "asc"}) == {"createdAt": "asc"}
        assert compose_sorter({"age": "asc"}) == {"createdAt": "desc"}

    def test_no_recognised_field_falls_back(self) -> None:
        assert compose_sorter({"secret": "asc"}, ["age"]) == {"createdAt": "desc"}

    def test_direction_is_normalised(self) -> None:
        assert compose_sorter({"age": "DESC"}, ["age"]) == {"age": "desc"}

    def test_invalid_direction_is_dropped(self) -> None:
        result = compose_sorter({"age": "sideways", "name": "asc"}, ["age", "name"])
        assert result == {"name": "asc"}

    def test_strict_rejects_unknown_field(self) -> None:
        with pytest.raises(FieldNotAllowedError) as exc:
            compose_sorter({"secret": "asc"}, ["age"], strict=True)
        assert exc.value.errors == {"secret": ["not sortable"]}

    def test_strict_rejects_invalid_direction(self) -> None:
        with pytest.raises(FieldNotAllowedError) as exc:
            compose_sorter({"age": "up"}, ["age"], strict=True)
        assert "age" in exc.value.errors


class TestComposeFilter:
    ALLOW = {"name": identity, "age": numeric}

    def test_end_to_end_example(self) -> None:
        result = compose_filter({"name": "Alice", "age": "gte|30", "other": "x"}, self.ALLOW)
        assert result == {"name": "Alice", "age": {"gte": 30}}

    def test_output_keys_subset_of_allow_list(self) -> None:
        result = compose_filter({"password": "x", "role": "admin"}, self.ALLOW)
        assert result == {}

    def test_absent_and_none_fields_are_omitted(self) -> None:
        assert compose_filter({"name": None}, self.ALLOW) == {}
        assert compose_filter(None, self.ALLOW) == {}

    def test_falsy_values_are_kept(self) -> None:
        assert compose_filter({"name": "", "age": 0}, self.ALLOW) == {"name": "", "age": 0}

    def test_unknown_fields_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="godbms_filtering.composer"):
            compose_filter({"secret": 1}, self.ALLOW)
        assert "secret" in caplog.text

    def test_strict_rejects_unknown_fields(self) -> None:
        with pytest.raises(FieldNotAllowedError) as exc:
            compose_filter({"name": "A", "secret": 1}, self.ALLOW, strict=True)
        assert exc.value.errors == {"secret": ["not filterable"]}

    def test_date_transform(self) -> None:
        result = compose_filter({"createdAt": f"lt|{EPOCH_MS}"}, {"createdAt": date})
        assert result == {"createdAt": {"lt": EPOCH_DT}}


class TestComposeFilterNumeric:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("equal|42", 42),
            ("gte|30", {"gte": 30}),
            ("lt|2.5", {"lt": 2.5}),
            ("not|abc", {"not": "abc"}),
            ("lte|inf", {"lte": "inf"}),
            ("42", 42),
            ("in|a|b", {"in": "a|b"}),
            ("lt|-3", {"lt": -3}),
            ("gte|1_000", {"gte": "1_000"}),
            ("gte| 42", {"gte": " 42"}),
            ("lt|1e3", {"lt": "1e3"}),
        ],
    )
    def test_number_kind(self, raw: str, expected: object) -> None:
        assert compose_filter_numeric(raw, "number") == expected

    def test_date_kind(self) -> None:
        value = compose_filter_numeric(f"gte|{EPOCH_MS}", "date")
        assert value == {"gte": EPOCH_DT}
        assert value["gte"].tzinfo is not None

    def test_date_kind_equal(self) -> None:
        assert compose_filter_numeric(str(EPOCH_MS), "date") == EPOCH_DT

    def test_string_kind_is_verbatim(self) -> None:
        assert compose_filter_numeric("equal|007", "string") == "007"

    def test_non_string_passes_through(self) -> None:
        assert compose_filter_numeric(42) == 42
        assert compose_filter_numeric({"gte": 1}) == {"gte": 1}

    def test_empty_operator_raises(self) -> None:
        with pytest.raises(FilterParseError):
            compose_filter_numeric("|30")

    def test_non_integer_date_raises(self) -> None:
        with pytest.raises(FilterParseError):
            compose_filter_numeric("gte|yesterday", "date")

    @pytest.mark.parametrize("needle", ["1_000", " 42", "4.5"])
    def test_date_kind_requires_plain_integer(self, needle: str) -> None:
        with pytest.raises(FilterParseError, match="epoch milliseconds"):
            compose_filter_numeric(f"gte|{needle}", "date")

    def test_out_of_range_date_raises(self) -> None:
        with pytest.raises(ValidationError, match="out of range"):
            compose_filter_numeric("gte|99999999999999999999", "date")
        with pytest.raises(FilterParseError):
            compose_filter_numeric("-99999999999999999", "date")

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="kind"):
            compose_filter_numeric("gte|1", "money")
