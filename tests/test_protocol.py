import pytest

from daqstream import protocol
from daqstream.protocol import (
    SampleType,
    Unit,
    data_type_for_sample_type,
)


def test_unit_defaults_to_no_unit():
    unit = Unit()
    assert unit.unit_id == Unit.UNIT_ID_NONE
    assert unit.unit_id == -1
    assert unit.display_name == ""
    assert unit.quantity == ""


def test_default_unit_is_neither_seconds_nor_user():
    unit = Unit()
    assert unit.unit_id == -1
    assert unit.unit_id != Unit.UNIT_ID_SECONDS
    assert unit.unit_id != Unit.UNIT_ID_MILLI_SECONDS
    assert unit.unit_id != Unit.UNIT_ID_USER
    assert Unit.UNIT_ID_SECONDS == 5457219
    assert Unit.UNIT_ID_MILLI_SECONDS == 4403766
    assert Unit.UNIT_ID_USER == 0


def test_units_are_independent_instances():
    first = Unit()
    second = Unit()
    first.display_name = "V"
    assert second.display_name == ""


@pytest.mark.parametrize(
    "sample_type, name",
    [
        (SampleType.S8, protocol.DATA_TYPE_INT8),
        (SampleType.U16, protocol.DATA_TYPE_UINT16),
        (SampleType.S32, protocol.DATA_TYPE_INT32),
        (SampleType.U64, protocol.DATA_TYPE_UINT64),
        (SampleType.REAL64, protocol.DATA_TYPE_REAL64),
        (SampleType.COMPLEX32, protocol.DATA_TYPE_COMPLEX32),
    ],
)
def test_data_type_for_sample_type(sample_type, name):
    assert data_type_for_sample_type(sample_type) == name


def test_real64_member_name():
    assert data_type_for_sample_type(SampleType.REAL64) == "real64"


@pytest.mark.parametrize(
    "sample_type",
    [SampleType.STRUCT, SampleType.ARRAY, SampleType.BITFIELD32, SampleType.UNKNOWN],
)
def test_data_type_for_non_scalar_raises(sample_type):
    with pytest.raises(ValueError):
        data_type_for_sample_type(sample_type)


def test_data_type_names_are_distinct():
    names = [data_type_for_sample_type(t) for t in SampleType
             if t not in (SampleType.UNKNOWN, SampleType.BITFIELD32,
                          SampleType.BITFIELD64, SampleType.ARRAY, SampleType.STRUCT)]
    assert len(names) == len(set(names))