"""Tests for type inference engine."""

from inference import (
    ColumnProfile,
    ColumnType,
    TypeInferenceEngine,
    TypeKind,
    infer_column_types,
)


def test_small_integers_resolve_to_tinyint() -> None:
    """Test that a max length of exactly 3 stays within TINYINT."""
    records = [{"age": "7"}, {"age": "12"}, {"age": "999"}]

    result = infer_column_types(records)

    assert result == {"age": ColumnType(TypeKind.TINYINT)}


def test_integer_width_boundaries() -> None:
    """Test integer width selection by maximum length."""
    result = infer_column_types(
        [
            {"small": "1234", "medium": "123456", "large": "12345678901"},
            {"small": "12345", "medium": "1234567890", "large": "1"},
        ],
    )

    assert result["small"].kind == TypeKind.SMALLINT
    assert result["medium"].kind == TypeKind.INT
    assert result["large"].kind == TypeKind.BIGINT


def test_non_numeric_wins_over_decimal() -> None:
    """Test that any text value turns a decimal column into VARCHAR."""
    records = [{"note": "3.14"}, {"note": "abc"}]

    result = infer_column_types(records)

    assert str(result["note"]) == "VARCHAR(4)"


def test_decimal_overrides_integer_width() -> None:
    """Test that a fractional value forces DECIMAL regardless of length."""
    records = [{"price": "1"}, {"price": "2.5"}, {"price": "123456789012"}]

    result = infer_column_types(records)

    assert result["price"].kind == TypeKind.DECIMAL
    assert str(result["price"]) == "DECIMAL(10,2)"


def test_whole_number_with_decimal_point_is_integer() -> None:
    """Test that 3.0 is numerically whole and does not force DECIMAL."""
    result = infer_column_types([{"qty": "3.0"}, {"qty": "4"}])

    assert result["qty"].kind == TypeKind.TINYINT


def test_long_text_resolves_to_text() -> None:
    """Test that text beyond 255 characters becomes TEXT."""
    result = infer_column_types([{"body": "x" * 256}, {"body": "short"}])

    assert result["body"] == ColumnType(TypeKind.TEXT)


def test_varchar_at_limit() -> None:
    """Test that exactly 255 characters is still VARCHAR."""
    result = infer_column_types([{"body": "y" * 255}])

    assert str(result["body"]) == "VARCHAR(255)"


def test_dates_resolve_to_datetime() -> None:
    """Test that consistently parseable dates resolve to DATETIME."""
    records = [
        {"created": "2024-01-15"},
        {"created": "2024-01-16 10:30:00"},
        {"created": "15/01/2024"},
    ]

    result = infer_column_types(records)

    assert result["created"].kind == TypeKind.DATETIME


def test_structured_values_resolve_to_json() -> None:
    """Test that nested objects or arrays mark the column as JSON."""
    records = [
        {"tags": '["a", "b"]', "meta": {"k": 1}},
        {"tags": "plain", "meta": None},
    ]

    result = infer_column_types(records)

    assert result["tags"].kind == TypeKind.JSON
    assert result["meta"].kind == TypeKind.JSON


def test_columns_follow_first_seen_order() -> None:
    """Test that columns missing from the first record are still profiled."""
    records = [{"a": "1"}, {"b": "x", "a": "2"}]

    result = infer_column_types(records)

    assert list(result) == ["a", "b"]
    assert result["b"] == ColumnType(TypeKind.VARCHAR, length=1)


def test_empty_record_set() -> None:
    """Test that no records yields no columns."""
    assert infer_column_types([]) == {}


def test_inference_is_deterministic() -> None:
    """Test repeated inference over the same records gives the same result."""
    records = [{"a": "1", "b": "x"}, {"a": "2.5", "b": "2024-01-01"}]

    assert infer_column_types(records) == infer_column_types(records)


def test_null_and_empty_values_do_not_change_type() -> None:
    """Test that nulls and empty strings neither confirm nor deny a type."""
    plain = [{"n": "12"}, {"n": "7"}]
    padded = [{"n": None}, {"n": "12"}, {"n": ""}, {"n": "7"}, {"n": None}]

    assert infer_column_types(plain) == infer_column_types(padded)


def test_date_flag_never_recovers() -> None:
    """Test that one non-date value disables date detection for good."""
    engine = TypeInferenceEngine()
    profile = ColumnProfile()

    engine.observe(profile, "2024-01-01")
    engine.observe(profile, "not a date")
    for _ in range(5):
        engine.observe(profile, "2024-02-01")

    assert profile.is_date is False
    assert engine.resolve(profile).kind == TypeKind.VARCHAR


def test_profile_tracks_evidence() -> None:
    """Test the raw profile flags for a mixed column."""
    engine = TypeInferenceEngine()

    profiles = engine.profile([{"v": "1.5"}, {"v": "hello"}, {"v": ""}])

    profile = profiles["v"]
    assert profile.max_length == 5
    assert profile.contains_decimal is True
    assert profile.contains_non_numeric is True
    assert profile.is_date is False
    assert profile.observed == 2


def test_native_json_numbers() -> None:
    """Test that native numeric values are profiled like their text form."""
    result = infer_column_types([{"score": 10}, {"score": 2.0}, {"rate": 0.25}])

    assert result["score"].kind == TypeKind.TINYINT
    assert result["rate"].kind == TypeKind.DECIMAL


def test_booleans_are_text() -> None:
    """Test that booleans are treated as their true/false rendering."""
    result = infer_column_types([{"flag": True}, {"flag": False}])

    assert str(result["flag"]) == "VARCHAR(5)"


def test_infinity_text_is_not_decimal() -> None:
    """Test that infinity spellings keep a column textual."""
    result = infer_column_types([{"v": "inf"}, {"v": "-Infinity"}])

    assert result == {"v": ColumnType(TypeKind.VARCHAR, length=9)}
