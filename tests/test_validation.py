from datetime import datetime, timedelta, timezone

import pytest

from taskboard.validation import (
    is_valid_hex_color,
    validate_category_data,
    validate_task_data,
)


@pytest.mark.parametrize("title", ["abc", "  Buy milk  ", "x" * 200])
def test_task_title_is_trimmed_and_accepted(title):
    result = validate_task_data({"title": title})
    assert result.ok
    assert result.data["title"] == title.strip()


@pytest.mark.parametrize("title", ["", "ab", "   a   ", None, "x" * 201])
def test_task_title_out_of_range_is_rejected(title):
    result = validate_task_data({"title": title})
    assert not result.ok
    assert "Title" in result.error


def test_only_provided_task_fields_are_returned():
    result = validate_task_data({"priority": "high"})
    assert result.ok
    assert result.data == {"priority": "high"}


def test_description_is_trimmed_and_may_be_empty():
    assert validate_task_data({"description": "  notes "}).data == {"description": "notes"}
    assert validate_task_data({"description": "   "}).data == {"description": ""}
    assert validate_task_data({"description": None}).data == {"description": None}


def test_unknown_status_and_priority_are_rejected():
    assert validate_task_data({"status": "done"}).error == "Invalid task status"
    assert validate_task_data({"priority": "urgent"}).error == "Invalid task priority"


def test_due_date_is_normalized_to_utc():
    local = datetime(2026, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=5)))
    result = validate_task_data({"due_date": local})
    assert result.data["due_date"] == datetime(2026, 3, 1, 7, 0, tzinfo=timezone.utc)
    assert result.data["due_date"].utcoffset() == timedelta(0)


def test_category_id_passes_through_unchecked():
    assert validate_task_data({"category_id": 999}).data == {"category_id": 999}


@pytest.mark.parametrize("name", ["ab", " Work ", "n" * 50])
def test_category_name_in_range(name):
    result = validate_category_data({"name": name})
    assert result.ok
    assert result.data["name"] == name.strip()


@pytest.mark.parametrize("name", ["a", "  b  ", "n" * 51, None])
def test_category_name_out_of_range(name):
    result = validate_category_data({"name": name})
    assert not result.ok
    assert result.error == "Category name must be between 2 and 50 characters"


@pytest.mark.parametrize("color", ["#FF5733", "#abcdef", "#000000"])
def test_hex_colors_accepted(color):
    assert is_valid_hex_color(color)
    assert validate_category_data({"color": color}).ok


@pytest.mark.parametrize("color", ["not-a-color", "#fff", "FF5733", "#GGGGGG", "#FF57331"])
def test_bad_colors_rejected(color):
    result = validate_category_data({"color": color})
    assert not result.ok
    assert result.error.startswith("Invalid color format")
