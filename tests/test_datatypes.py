import struct

import pytest

from daqstream.datatypes import (
    UnsupportedDataTypeError,
    data_type_size,
    interpret_values_as_double,
    sample_type_for_definition,
)
from daqstream.protocol import RuleType, SampleType

SCALARS = [
    ("uint8", "B", SampleType.U8),
    ("uint16", "H", SampleType.U16),
    ("uint32", "I", SampleType.U32),
    ("uint64", "Q", SampleType.U64),
    ("int8", "b", SampleType.S8),
    ("int16", "h", SampleType.S16),
    ("int32", "i", SampleType.S32),
    ("int64", "q", SampleType.S64),
    ("real32", "f", SampleType.REAL32),
    ("real64", "d", SampleType.REAL64),
    ("complex32", "ff", SampleType.COMPLEX32),
    ("complex64", "dd", SampleType.COMPLEX64),
]


@pytest.mark.parametrize("name, fmt, _sample_type", SCALARS)
def test_scalar_sizes(name, fmt, _sample_type):
    assert data_type_size({"dataType": name}) == struct.calcsize("<" + fmt)


@pytest.mark.parametrize("name, _fmt, sample_type", SCALARS)
def test_scalar_sample_types(name, _fmt, sample_type):
    assert sample_type_for_definition({"dataType": name}) is sample_type


def test_size_without_data_type_is_zero():
    assert data_type_size({"name": "x"}) == 0


def test_size_of_unknown_type_is_zero():
    assert data_type_size({"dataType": "dynamicArray"}) == 0


def test_bitfield_size_follows_base_type():
    definition = {"dataType": "bitField", "bitField": {"dataType": "uint64"}}
    assert data_type_size(definition) == struct.calcsize("<Q")


def test_array_size():
    definition = {"dataType": "array", "array": {"dataType": "int16", "count": 3}}
    assert data_type_size(definition) == struct.calcsize("<3h")


def test_struct_size():
    definition = {
        "dataType": "struct",
        "name": "theStruct",
        "struct": [
            {"name": "Int16Array", "dataType": "array",
             "array": {"dataType": "int16", "count": 4}},
            {"name": "Int32", "dataType": "int32"},
        ],
    }
    assert data_type_size(definition) == struct.calcsize("<4hi")


def test_array_without_count_raises():
    with pytest.raises(UnsupportedDataTypeError):
        data_type_size({"dataType": "array", "array": {"dataType": "int16"}})


def test_data_type_not_a_string_raises():
    with pytest.raises(UnsupportedDataTypeError):
        data_type_size({"dataType": 5})


def test_sample_type_none_without_data_type():
    assert sample_type_for_definition({}) is None


@pytest.mark.parametrize("base, expected", [
    ("uint32", SampleType.BITFIELD32),
    ("uint64", SampleType.BITFIELD64),
])
def test_bitfield_sample_types(base, expected):
    definition = {"dataType": "bitField", "bitField": {"dataType": base}}
    assert sample_type_for_definition(definition) is expected


def test_bitfield_uint16_unsupported():
    definition = {"dataType": "bitField", "bitField": {"dataType": "uint16"}}
    with pytest.raises(UnsupportedDataTypeError):
        sample_type_for_definition(definition)


def test_bitfield_without_details_raises():
    with pytest.raises(UnsupportedDataTypeError):
        sample_type_for_definition({"dataType": "bitField"})


def test_array_and_struct_sample_types():
    array = {"dataType": "array", "array": {"dataType": "int16", "count": 3}}
    members = {"dataType": "struct", "struct": [{"dataType": "int32"}]}
    assert sample_type_for_definition(array) is SampleType.ARRAY
    assert sample_type_for_definition(members) is SampleType.STRUCT


@pytest.mark.parametrize("name", ["dynamicArray", "quaternion"])
def test_unsupported_sample_types_raise(name):
    with pytest.raises(UnsupportedDataTypeError):
        sample_type_for_definition({"dataType": name})


@pytest.mark.parametrize("fmt, sample_type, values", [
    ("H", SampleType.U16, [1, 2, 3]),
    ("b", SampleType.S8, [-1, -2, -3]),
    ("h", SampleType.S16, [-1, -2, -3]),
    ("i", SampleType.S32, [-100, 0, 100]),
    ("I", SampleType.BITFIELD32, [0x01000000, 0x02000000, 0x03000000]),
    ("d", SampleType.REAL64, [1.1, 2.2, 3.3]),
    ("f", SampleType.REAL32, [0.5, -1.5, 2.0]),
    ("B", SampleType.U8, [0, 127, 255]),
])
def test_explicit_values_round_trip(fmt, sample_type, values):
    data = struct.pack("<%d%s" % (len(values), fmt), *values)
    result = interpret_values_as_double(data, len(values), sample_type, RuleType.EXPLICIT)
    assert result == [float(v) for v in values]


def test_implicit_values_skip_value_index():
    values = [5, 6, 7]
    data = b"".join(struct.pack("<QI", index, value) for index, value in enumerate(values))
    result = interpret_values_as_double(data, len(values), SampleType.U32, RuleType.CONSTANT)
    assert result == [5.0, 6.0, 7.0]


def test_implicit_bitfield64():
    values = [0x0100000000, 0x0200000000, 0x0300000000]
    data = b"".join(struct.pack("<Qq", index, value) for index, value in enumerate(values))
    result = interpret_values_as_double(data, len(values), SampleType.BITFIELD64, RuleType.LINEAR)
    assert result == [float(v) for v in values]


def test_uint64_read_as_signed():
    data = struct.pack("<Q", 1 << 63)
    assert interpret_values_as_double(data, 1, SampleType.U64, RuleType.EXPLICIT) == [float(-(1 << 63))]


def test_fewer_values_than_data():
    data = struct.pack("<3h", 4, 5, 6)
    assert interpret_values_as_double(data, 2, SampleType.S16, RuleType.EXPLICIT) == [4.0, 5.0]


@pytest.mark.parametrize("sample_type", [
    SampleType.COMPLEX32, SampleType.COMPLEX64, SampleType.ARRAY,
    SampleType.STRUCT, SampleType.UNKNOWN,
])
def test_unsupported_sample_types_give_nothing(sample_type):
    data = bytes(64)
    assert interpret_values_as_double(data, 2, sample_type, RuleType.EXPLICIT) == []


def test_short_data_raises():
    data = struct.pack("<2i", 1, 2)
    with pytest.raises(ValueError):
        interpret_values_as_double(data, 3, SampleType.S32, RuleType.EXPLICIT)


def test_zero_count_gives_empty_list():
    assert interpret_values_as_double(b"", 0, SampleType.S32, RuleType.EXPLICIT) == []