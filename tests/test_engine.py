import json

import pytest

from csv_reconciliation.audit.summary_writer import PAIR_SUMMARY_FILE
from csv_reconciliation.csv_operations import CsvOperations
from csv_reconciliation.exceptions import ConfigurationError, PairProcessingError
from csv_reconciliation.reconciliation.engine import (
    MATCHED_FILE,
    ONLY_IN_A_FILE,
    ONLY_IN_B_FILE,
    ReconciliationEngine,
)

from conftest import matching, read_csv


@pytest.fixture
def engine_factory(logger, summary_writer):
    def _create(*fields, **kwargs):
        return ReconciliationEngine(
            matching(*fields, **kwargs), CsvOperations(), logger, summary_writer
        )

    return _create


@pytest.fixture
def pair_folder(summary_writer):
    return summary_writer.create_pair_folder("a.csv", "b.csv")


def distinct_keys(engine, path):
    generator = engine.key_generator
    records = CsvOperations().read_table(path).records
    return {generator.generate_key(r) for r in records if generator.has_required_fields(r)}


def assert_keys_partitioned(result, engine, file_a, file_b):
    assert result.matched + result.only_in_a == len(distinct_keys(engine, file_a))
    assert result.matched + result.only_in_b == len(distinct_keys(engine, file_b))


def test_engine_requires_matching_fields(logger, summary_writer):
    with pytest.raises(ConfigurationError):
        ReconciliationEngine(matching(), CsvOperations(), logger, summary_writer)


def test_basic_reconciliation(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["id", "name"], ["1", "x"]])
    file_b = csv_writer("B/data.csv", [["id", "name"], ["1", "y"], ["2", "z"]])

    engine = engine_factory("id")
    result = engine.reconcile(file_a, file_b, pair_folder)

    assert result.status == "success"
    assert result.total_in_a == 1
    assert result.total_in_b == 2
    assert result.matched == 1
    assert result.only_in_a == 0
    assert result.only_in_b == 1
    assert result.warnings == []
    assert result.errors == []
    assert result.processing_time_seconds >= 0
    assert_keys_partitioned(result, engine, file_a, file_b)


def test_output_files(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["id", "name"], ["1", "x"], ["3", "w"]])
    file_b = csv_writer("B/data.csv", [["id", "city"], ["1", "Oslo"], ["2", "Rome"]])

    engine_factory("id").reconcile(file_a, file_b, pair_folder)

    assert read_csv(pair_folder / MATCHED_FILE) == [
        ["A_id", "A_name", "B_id", "B_city"],
        ["1", "x", "1", "Oslo"],
    ]
    assert read_csv(pair_folder / ONLY_IN_A_FILE) == [["id", "name", "city"], ["3", "w", ""]]
    assert read_csv(pair_folder / ONLY_IN_B_FILE) == [["id", "name", "city"], ["2", "", "Rome"]]


def test_pair_summary_is_written(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["id"], ["1"]])
    file_b = csv_writer("B/data.csv", [["id"], ["1"]])

    engine_factory("id").reconcile(file_a, file_b, pair_folder)

    document = json.loads((pair_folder / PAIR_SUMMARY_FILE).read_text(encoding="utf-8"))
    assert document["file_name_a"] == "data.csv"
    assert document["matched"] == 1
    assert document["status"] == "success"


def test_empty_sets_produce_empty_files(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["id"], ["1"]])
    file_b = csv_writer("B/data.csv", [["id"], ["2"]])

    result = engine_factory("id").reconcile(file_a, file_b, pair_folder)

    assert result.matched == 0
    assert (pair_folder / MATCHED_FILE).read_text(encoding="utf-8") == ""


def test_record_missing_key_field_is_excluded_with_warning(
    engine_factory, csv_writer, pair_folder
):
    file_a = csv_writer("A/data.csv", [["id", "name"], ["1", "x"]])
    file_b = csv_writer("B/data.csv", [["name"], ["y"]])

    engine = engine_factory("id")
    result = engine.reconcile(file_a, file_b, pair_folder)

    assert result.total_in_b == 1
    assert result.only_in_a == 1
    assert result.only_in_b == 0
    assert result.warnings == ["Record at line 2 in B missing fields: id"]
    assert_keys_partitioned(result, engine, file_a, file_b)


def test_short_row_takes_part_in_matching(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["name", "id"], ["x"]])
    file_b = csv_writer("B/data.csv", [["name", "id"], ["x", ""]])

    engine = engine_factory("id")
    result = engine.reconcile(file_a, file_b, pair_folder)

    assert result.matched == 1
    assert result.only_in_a == 0
    assert result.only_in_b == 0
    assert result.warnings == []
    assert_keys_partitioned(result, engine, file_a, file_b)


def test_duplicate_key_first_occurrence_wins(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["id", "name"], ["1", "first"], ["1", "second"]])
    file_b = csv_writer("B/data.csv", [["id", "name"], ["1", "other"]])

    engine = engine_factory("id")
    result = engine.reconcile(file_a, file_b, pair_folder)

    assert result.total_in_a == 2
    assert result.matched == 1
    assert result.only_in_a == 0
    assert len(result.warnings) == 1
    assert "Duplicate key '1'" in result.warnings[0]
    assert "line 3 in A" in result.warnings[0]
    assert read_csv(pair_folder / MATCHED_FILE)[1][1] == "first"
    assert_keys_partitioned(result, engine, file_a, file_b)


def test_case_insensitive_and_trimmed_matching(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["first", "last"], [" John ", "DOE"]])
    file_b = csv_writer("B/data.csv", [["first", "last"], ["john", "doe"]])

    result = engine_factory("first", "last").reconcile(file_a, file_b, pair_folder)

    assert result.matched == 1


def test_case_sensitive_matching(engine_factory, csv_writer, pair_folder):
    file_a = csv_writer("A/data.csv", [["name"], ["John"]])
    file_b = csv_writer("B/data.csv", [["name"], ["JOHN"]])

    result = engine_factory("name", case_sensitive=True).reconcile(file_a, file_b, pair_folder)

    assert result.matched == 0
    assert result.only_in_a == 1
    assert result.only_in_b == 1


def test_record_error_is_collected_and_record_skipped(
    engine_factory, csv_writer, pair_folder, mocker
):
    file_a = csv_writer("A/data.csv", [["id"], ["1"], ["bad"]])
    file_b = csv_writer("B/data.csv", [["id"], ["1"]])
    engine = engine_factory("id")
    original = engine.key_generator.generate_key

    def generate_key(record):
        if record["id"] == "bad":
            raise ValueError("boom")
        return original(record)

    mocker.patch.object(engine.key_generator, "generate_key", side_effect=generate_key)

    result = engine.reconcile(file_a, file_b, pair_folder)

    assert result.status == "success"
    assert result.total_in_a == 2
    assert result.matched == 1
    assert result.only_in_a == 0
    assert result.errors == ["Error processing record at line 3 in A: boom"]


def test_unreadable_file_raises_with_partial_result(engine_factory, csv_writer, pair_folder):
    file_b = csv_writer("B/data.csv", [["id"], ["1"]])

    with pytest.raises(PairProcessingError) as exc_info:
        engine_factory("id").reconcile(pair_folder / "missing.csv", file_b, pair_folder)

    result = exc_info.value.result
    assert result.status == "failed"
    assert result.file_name_a == "missing.csv"
    assert result.errors[0].startswith("Reconciliation failed:")
    assert result.end_time is not None
