import pytest

from csv_reconciliation.config.models import MatchingConfig
from csv_reconciliation.core.key_generator import KEY_SEPARATOR, MatchingKeyGenerator
from csv_reconciliation.exceptions import ConfigurationError

from conftest import make_record, matching


def test_none_config_is_rejected():
    with pytest.raises(ConfigurationError):
        MatchingKeyGenerator(None)


def test_empty_matching_fields_are_rejected():
    with pytest.raises(ConfigurationError):
        MatchingKeyGenerator(MatchingConfig(matching_fields=[]))


def test_single_field_key_is_trimmed():
    generator = MatchingKeyGenerator(matching("OrderId"))
    record = make_record({"OrderId": "  12345  ", "CustomerName": "John Doe"})

    assert generator.generate_key(record) == "12345"


def test_composite_key_joins_parts_in_configured_order():
    generator = MatchingKeyGenerator(matching("LastName", "FirstName"))
    record = make_record({"FirstName": "John", "LastName": "Doe"})

    assert generator.generate_key(record) == "doe||john"
    assert KEY_SEPARATOR == "||"


def test_case_insensitive_keys_are_equal():
    generator = MatchingKeyGenerator(matching("Name", case_sensitive=False))

    assert generator.generate_key(make_record({"Name": "John"})) == generator.generate_key(
        make_record({"Name": "JOHN"})
    )


def test_case_sensitive_keys_differ():
    generator = MatchingKeyGenerator(matching("Name", case_sensitive=True))

    assert generator.generate_key(make_record({"Name": "John"})) == "John"
    assert generator.generate_key(make_record({"Name": "John"})) != generator.generate_key(
        make_record({"Name": "JOHN"})
    )


def test_trim_makes_padded_values_equal():
    generator = MatchingKeyGenerator(matching("Name", trim=True))

    assert generator.generate_key(make_record({"Name": "  John  "})) == generator.generate_key(
        make_record({"Name": "John"})
    )


def test_without_trim_whitespace_is_kept():
    generator = MatchingKeyGenerator(matching("Name", trim=False))

    assert generator.generate_key(make_record({"Name": "  John  "})) == "  john  "
    assert generator.generate_key(make_record({"Name": "  John  "})) != generator.generate_key(
        make_record({"Name": "John"})
    )


def test_missing_field_contributes_empty_part():
    generator = MatchingKeyGenerator(matching("A", "B"))

    assert generator.generate_key(make_record({"A": "x"})) == "x||"


def test_generate_key_is_deterministic():
    generator = MatchingKeyGenerator(matching("Id", "Name"))
    record = make_record({"Id": " 7 ", "Name": "Mixed Case"})

    assert generator.generate_key(record) == generator.generate_key(record)
    assert MatchingKeyGenerator(matching("Id", "Name")).generate_key(record) == generator.generate_key(
        record
    )


def test_has_required_fields_when_all_present():
    generator = MatchingKeyGenerator(matching("FirstName", "LastName"))
    record = make_record({"FirstName": "John", "LastName": "Doe", "Email": "john@example.com"})

    assert generator.has_required_fields(record)


def test_has_required_fields_accepts_empty_values():
    generator = MatchingKeyGenerator(matching("FirstName"))

    assert generator.has_required_fields(make_record({"FirstName": ""}))


def test_has_required_fields_when_one_missing():
    generator = MatchingKeyGenerator(matching("FirstName", "LastName"))

    assert not generator.has_required_fields(make_record({"FirstName": "John"}))


def test_get_missing_fields_in_configured_order():
    generator = MatchingKeyGenerator(matching("FirstName", "LastName", "Email"))

    assert generator.get_missing_fields(make_record({"FirstName": "John"})) == ["LastName", "Email"]
