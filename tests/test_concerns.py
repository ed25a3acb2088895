import pytest
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from wither.concerns import (
    Acknowledgment,
    ConcernSpecError,
    ReadConcernLevel,
    WriteConcernSpec,
    read_concern_from_spec,
    write_concern_from_spec,
)


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("local", ReadConcern("local")),
        ("majority", ReadConcern("majority")),
        ("linearizable", ReadConcern("linearizable")),
        ("available", ReadConcern("available")),
        ({"custom": "custom-concern"}, ReadConcern("custom-concern")),
    ],
)
def test_read_concern_specs(spec, expected):
    assert read_concern_from_spec(spec) == expected


def test_read_concern_level_member():
    assert read_concern_from_spec(ReadConcernLevel.MAJORITY).level == "majority"


def test_read_concern_none_and_passthrough():
    rc = ReadConcern("local")
    assert read_concern_from_spec(None) is None
    assert read_concern_from_spec(rc) is rc


@pytest.mark.parametrize(
    "spec",
    ["invalid", "Majority", 42, {"custom": 5}, {"level": "local"}, {"custom": "a", "x": "b"}],
)
def test_invalid_read_concern(spec):
    with pytest.raises(ConcernSpecError):
        read_concern_from_spec(spec)


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        (
            {"w": "majority", "w_timeout": 10, "journal": True},
            WriteConcern(w="majority", wtimeout=10000, j=True),
        ),
        (
            {"w": {"nodes": 3}, "w_timeout": 0, "journal": False},
            WriteConcern(w=3, wtimeout=0, j=False),
        ),
        ({"w": {"custom": "custom"}}, WriteConcern(w="custom")),
        ({"w_timeout": 999}, WriteConcern(wtimeout=999000)),
        ({"journal": True}, WriteConcern(j=True)),
        ({}, WriteConcern()),
    ],
)
def test_write_concern_specs(spec, expected):
    assert write_concern_from_spec(spec) == expected


def test_write_concern_spec_object():
    spec = WriteConcernSpec(w=Acknowledgment(3), w_timeout=0, journal=False)
    assert spec.to_write_concern() == WriteConcern(w=3, wtimeout=0, j=False)
    assert write_concern_from_spec(spec) == WriteConcern(w=3, wtimeout=0, j=False)


def test_write_concern_spec_parses_raw_acknowledgment():
    spec = WriteConcernSpec(w="majority")
    assert spec.w == Acknowledgment("majority")
    assert spec.to_write_concern() == WriteConcern(w="majority")


def test_write_concern_none_and_passthrough():
    wc = WriteConcern(w=1)
    assert write_concern_from_spec(None) is None
    assert write_concern_from_spec(wc) is wc


@pytest.mark.parametrize(
    "spec",
    [
        {"w": "WriteConcern::Majority", "w_timeout": 10, "journal": False},
        {"w": "nodes"},
        {"w": {"nodes": "3"}},
        {"w": {"nodes": 3, "custom": "x"}},
        {"wtimeout": 5},
        {"w_timeout": -1},
        {"w_timeout": True},
        {"journal": "yes"},
        "majority",
    ],
)
def test_invalid_write_concern(spec):
    with pytest.raises(ConcernSpecError):
        write_concern_from_spec(spec)


def test_driver_rejection_becomes_spec_error():
    with pytest.raises(ConcernSpecError):
        write_concern_from_spec({"w": {"nodes": 0}, "journal": True})


@pytest.mark.parametrize("value", [True, 1.5, None, 2**31])
def test_invalid_acknowledgment_values(value):
    with pytest.raises(ConcernSpecError):
        Acknowledgment(value)