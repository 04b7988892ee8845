"""Unit tests for retoml.model.convert and retoml.model.serializer."""
from __future__ import annotations

import datetime as dt
import json

import pytest
import yaml

from retoml import parse_document
from retoml.model import (
    Array,
    ArrayOfTables,
    Datetime,
    DocumentSerializer,
    Formatted,
    InlineTable,
    Table,
    table_from,
    unwrap,
    value_from,
)


# ---------------------------------------------------------------------------
# value_from
# ---------------------------------------------------------------------------


class TestValueFrom:
    def test_model_values_pass_through(self) -> None:
        value = Formatted(1)
        assert value_from(value) is value

    @pytest.mark.parametrize("obj", [True, 0, -5, 1.5, "text"])
    def test_scalars(self, obj: object) -> None:
        value = value_from(obj)
        assert isinstance(value, Formatted)
        assert value.value == obj

    def test_bool_stays_bool(self) -> None:
        assert value_from(False).type_name() == "boolean"

    def test_integer_limits(self) -> None:
        assert value_from(2**63 - 1).value == 2**63 - 1  # type: ignore[union-attr]
        assert value_from(-(2**63)).value == -(2**63)  # type: ignore[union-attr]
        with pytest.raises(ValueError):
            value_from(2**63)
        with pytest.raises(ValueError):
            value_from(-(2**63) - 1)

    def test_python_datetimes(self) -> None:
        value = value_from(dt.date(1979, 5, 27))
        assert isinstance(value, Formatted)
        assert isinstance(value.value, Datetime)
        assert str(value.value) == "1979-05-27"

    def test_mapping_becomes_inline_table(self) -> None:
        assert isinstance(value_from({"a": 1}), InlineTable)

    @pytest.mark.parametrize("obj", [[1, 2], (1, 2)])
    def test_sequences_become_arrays(self, obj: object) -> None:
        value = value_from(obj)
        assert isinstance(value, Array)
        assert unwrap(value) == [1, 2]

    def test_tables_are_rejected(self) -> None:
        with pytest.raises(TypeError):
            value_from(Table())
        with pytest.raises(TypeError):
            value_from(ArrayOfTables())

    def test_unknown_type(self) -> None:
        with pytest.raises(TypeError):
            value_from(object())


# ---------------------------------------------------------------------------
# table_from
# ---------------------------------------------------------------------------


class TestTableFrom:
    def test_nested_mappings_become_tables(self) -> None:
        table = table_from({"a": {"b": {"c": 1}}})
        a = table["a"]
        assert isinstance(a, Table)
        assert a.implicit
        b = a["b"]
        assert isinstance(b, Table)
        assert not b.implicit

    def test_empty_mapping_gets_a_header(self) -> None:
        t = table_from({"t": {}})["t"]
        assert isinstance(t, Table)
        assert not t.implicit

    def test_list_of_mappings_becomes_array_of_tables(self) -> None:
        table = table_from({"p": [{"x": 1}, {"x": 2}]})
        assert isinstance(table["p"], ArrayOfTables)

    def test_mixed_list_stays_an_array(self) -> None:
        table = table_from({"p": [1, {"x": 1}]})
        assert isinstance(table["p"], Array)


# ---------------------------------------------------------------------------
# unwrap
# ---------------------------------------------------------------------------


class TestUnwrap:
    def test_document(self, sample_text: str) -> None:
        data = parse_document(sample_text).unwrap()
        assert data["database"]["ports"] == [8000, 8001, 8002]
        assert data["servers"]["beta"]["ip"] == "10.0.0.2"
        assert [p["name"] for p in data["products"]] == ["Hammer", "Nail"]

    def test_offset_datetime(self) -> None:
        data = parse_document("t = 1979-05-27T07:32:00Z\n").unwrap()
        assert data["t"] == dt.datetime(1979, 5, 27, 7, 32, tzinfo=dt.timezone.utc)

    def test_local_date_and_time(self) -> None:
        data = parse_document("d = 1979-05-27\nt = 07:32:00\n").unwrap()
        assert data == {"d": dt.date(1979, 5, 27), "t": dt.time(7, 32)}

    def test_leap_second_stays_datetime(self) -> None:
        data = parse_document("t = 23:59:60\n").unwrap()
        assert isinstance(data["t"], Datetime)

    def test_unknown_item(self) -> None:
        with pytest.raises(TypeError):
            unwrap("plain string")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# DocumentSerializer
# ---------------------------------------------------------------------------


class TestDocumentSerializer:
    def test_to_json(self, sample_text: str) -> None:
        data = json.loads(DocumentSerializer().to_json(parse_document(sample_text)))
        assert data["title"] == "TOML Example"
        assert data["owner"]["dob"] == "1979-05-27T07:32:00-08:00"
        assert data["products"][1]["color"] == "gray"

    def test_special_floats_become_strings(self) -> None:
        doc = parse_document("a = inf\nb = -inf\nc = nan\n")
        assert DocumentSerializer().to_dict(doc) == {"a": "inf", "b": "-inf", "c": "nan"}

    def test_to_yaml(self, sample_text: str) -> None:
        text = DocumentSerializer().to_yaml(parse_document(sample_text))
        assert "title: TOML Example" in text
        data = yaml.safe_load(text)
        assert data["clients"]["hosts"] == ["alpha", "omega"]

    def test_from_dict(self) -> None:
        doc = DocumentSerializer().from_dict({"a": {"b": 1}, "c": [1, 2]})
        assert str(doc) == "c = [1, 2]\n\n[a]\nb = 1\n"

    def test_from_json(self) -> None:
        doc = DocumentSerializer().from_json('{"name": "x", "p": [{"n": 1}]}')
        assert str(doc) == 'name = "x"\n\n[[p]]\nn = 1\n'

    def test_from_yaml_keeps_dates(self) -> None:
        doc = DocumentSerializer().from_yaml("when: 2020-01-02\n")
        assert str(doc) == "when = 2020-01-02\n"
        assert doc.unwrap() == {"when": dt.date(2020, 1, 2)}

    def test_json_round_trip_of_plain_data(self) -> None:
        serializer = DocumentSerializer()
        doc = parse_document("a = 1\n[t]\nlist = [\"x\", \"y\"]\n")
        again = serializer.from_json(serializer.to_json(doc))
        assert again.unwrap() == doc.unwrap()
