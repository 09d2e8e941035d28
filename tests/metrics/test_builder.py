"""Unit tests for MetricRecord and MetricBuilder."""

import dataclasses

import pytest

from pizza_metrics.metrics.builder import MetricBuilder, MetricRecord


def test_single_line_has_no_trailing_separators():
    builder = MetricBuilder()
    builder.append("x", {"t": "v"}, {"f": 1})
    assert builder.serialize("\n") == "x,t=v f=1"


def test_multiple_tags_and_fields():
    builder = MetricBuilder()
    builder.append("http_requests", {"source": "svc", "method": "get"}, {"total": 3, "rate": 0.5})
    assert builder.serialize("\n") == "http_requests,source=svc,method=get total=3,rate=0.5"


def test_no_tags():
    builder = MetricBuilder()
    builder.append("users", None, {"total": 0})
    builder.append("chaos", {}, {"enabled": True})
    assert builder.serialize("\n") == "users total=0\nchaos enabled=1"


def test_serialize_uses_delimiter():
    builder = MetricBuilder()
    builder.append("a", {}, {"v": 1})
    builder.append("b", {}, {"v": 2})
    assert builder.serialize(";") == "a v=1;b v=2"
    assert len(builder) == 2


def test_empty_builder_serializes_to_empty_string():
    assert MetricBuilder().serialize("\n") == ""


def test_append_record_matches_append():
    record = MetricRecord.create("svc", "auth", {"result": "Failed"}, {"total": 4})
    builder = MetricBuilder()
    builder.append_record(record)
    assert builder.serialize() == "auth,source=svc,result=Failed total=4"


def test_record_source_tag_comes_first():
    record = MetricRecord.create("svc", "system", {"type": "CPU"}, {"usage": 12.5})
    assert list(record.tags) == ["source", "type"]
    assert record.tags["source"] == "svc"


def test_record_is_immutable():
    record = MetricRecord.create("svc", "users", None, {"total": 1})
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.name = "other"
    with pytest.raises(TypeError):
        record.fields["total"] = 2


def test_record_does_not_alias_caller_mappings():
    fields = {"total": 1}
    record = MetricRecord.create("svc", "users", None, fields)
    fields["total"] = 99
    assert record.fields["total"] == 1


@pytest.mark.parametrize("name,fields", [("", {"v": 1}), ("x", {}), ("x", {"": 1})])
def test_record_rejects_empty_name_or_fields(name, fields):
    with pytest.raises(ValueError):
        MetricRecord(name=name, tags={}, fields=fields)


def test_records_compare_by_value():
    a = MetricRecord.create("svc", "auth", {"result": "Successful"}, {"total": 1})
    b = MetricRecord.create("svc", "auth", {"result": "Successful"}, {"total": 1})
    assert a == b
    assert hash(a) == hash(b)
