"""Sizes, sample types and value conversion for signal data type definitions."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Any

from daqstream.protocol import (
    DATA_TYPE_ARRAY,
    DATA_TYPE_BITFIELD,
    DATA_TYPE_COMPLEX32,
    DATA_TYPE_COMPLEX64,
    DATA_TYPE_DYNAMIC_ARRAY,
    DATA_TYPE_INT8,
    DATA_TYPE_INT16,
    DATA_TYPE_INT32,
    DATA_TYPE_INT64,
    DATA_TYPE_REAL32,
    DATA_TYPE_REAL64,
    DATA_TYPE_STRUCT,
    DATA_TYPE_UINT8,
    DATA_TYPE_UINT16,
    DATA_TYPE_UINT32,
    DATA_TYPE_UINT64,
    RuleType,
    SampleType,
)

META_DATATYPE = "dataType"
META_COUNT = "count"

_VALUE_INDEX_FORMAT = "Q"

_SCALAR_SIZES = {
    DATA_TYPE_UINT8: 1,
    DATA_TYPE_UINT16: 2,
    DATA_TYPE_UINT32: 4,
    DATA_TYPE_UINT64: 8,
    DATA_TYPE_INT8: 1,
    DATA_TYPE_INT16: 2,
    DATA_TYPE_INT32: 4,
    DATA_TYPE_INT64: 8,
    DATA_TYPE_REAL32: 4,
    DATA_TYPE_REAL64: 8,
    DATA_TYPE_COMPLEX32: 8,
    DATA_TYPE_COMPLEX64: 16,
}

_SCALAR_SAMPLE_TYPES = {
    DATA_TYPE_UINT8: SampleType.U8,
    DATA_TYPE_UINT16: SampleType.U16,
    DATA_TYPE_UINT32: SampleType.U32,
    DATA_TYPE_UINT64: SampleType.U64,
    DATA_TYPE_INT8: SampleType.S8,
    DATA_TYPE_INT16: SampleType.S16,
    DATA_TYPE_INT32: SampleType.S32,
    DATA_TYPE_INT64: SampleType.S64,
    DATA_TYPE_REAL32: SampleType.REAL32,
    DATA_TYPE_REAL64: SampleType.REAL64,
    DATA_TYPE_COMPLEX32: SampleType.COMPLEX32,
    DATA_TYPE_COMPLEX64: SampleType.COMPLEX64,
}

_BITFIELD_SAMPLE_TYPES = {
    DATA_TYPE_UINT32: SampleType.BITFIELD32,
    DATA_TYPE_UINT64: SampleType.BITFIELD64,
}

# 64 bit unsigned values are read as signed, as the wire consumers always did.
_VALUE_FORMATS = {
    SampleType.REAL32: "f",
    SampleType.REAL64: "d",
    SampleType.U8: "B",
    SampleType.U16: "H",
    SampleType.U32: "I",
    SampleType.BITFIELD32: "I",
    SampleType.U64: "q",
    SampleType.BITFIELD64: "q",
    SampleType.S8: "b",
    SampleType.S16: "h",
    SampleType.S32: "i",
    SampleType.S64: "q",
}


class UnsupportedDataTypeError(ValueError):
    """A data type definition is malformed or names a type that is not supported."""


def _data_type_name(definition: Any) -> str | None:
    if not isinstance(definition, Mapping):
        raise UnsupportedDataTypeError("data type definition must be an object")
    if META_DATATYPE not in definition:
        return None
    name = definition[META_DATATYPE]
    if not isinstance(name, str):
        raise UnsupportedDataTypeError(f"data type must be a string, not {name!r}")
    return name


def _details(definition: Mapping[str, Any], key: str) -> Any:
    try:
        return definition[key]
    except KeyError:
        raise UnsupportedDataTypeError(f"data type '{key}' lacks its '{key}' details") from None


def data_type_size(definition: Mapping[str, Any]) -> int:
    """Return the number of bytes one value of ``definition`` takes.

    Returns 0 when there is no data type or the data type has no fixed size.
    """
    name = _data_type_name(definition)
    if name is None:
        return 0
    if name in _SCALAR_SIZES:
        return _SCALAR_SIZES[name]
    if name == DATA_TYPE_BITFIELD:
        return data_type_size(_details(definition, DATA_TYPE_BITFIELD))
    if name == DATA_TYPE_ARRAY:
        details = _details(definition, DATA_TYPE_ARRAY)
        if not isinstance(details, Mapping):
            raise UnsupportedDataTypeError("array details must be an object")
        count = details.get(META_COUNT)
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise UnsupportedDataTypeError(f"array count must be an unsigned integer, not {count!r}")
        return data_type_size(details) * count
    if name == DATA_TYPE_STRUCT:
        members = _details(definition, DATA_TYPE_STRUCT)
        if isinstance(members, Mapping):
            members = members.values()
        elif not isinstance(members, list):
            raise UnsupportedDataTypeError("struct members must be an array")
        return sum(data_type_size(member) for member in members)
    return 0


def sample_type_for_definition(definition: Mapping[str, Any]) -> SampleType | None:
    """Return the sample type named by ``definition``, or None when it names none."""
    name = _data_type_name(definition)
    if name is None:
        return None
    if name in _SCALAR_SAMPLE_TYPES:
        return _SCALAR_SAMPLE_TYPES[name]
    if name == DATA_TYPE_BITFIELD:
        details = _details(definition, DATA_TYPE_BITFIELD)
        base = _data_type_name(details)
        try:
            return _BITFIELD_SAMPLE_TYPES[base]
        except KeyError:
            raise UnsupportedDataTypeError(
                f"bit field of type '{base}' is not supported") from None
    if name == DATA_TYPE_ARRAY:
        _details(definition, DATA_TYPE_ARRAY)
        return SampleType.ARRAY
    if name == DATA_TYPE_STRUCT:
        _details(definition, DATA_TYPE_STRUCT)
        return SampleType.STRUCT
    if name == DATA_TYPE_DYNAMIC_ARRAY:
        raise UnsupportedDataTypeError("data type 'dynamicArray' is not supported")
    raise UnsupportedDataTypeError(f"unknown data type '{name}'")


def interpret_values_as_double(data: bytes, count: int, sample_type: SampleType,
                               rule_type: RuleType) -> list[float]:
    """Convert ``count`` values in ``data`` to floats.

    Values of signals with an explicit rule are packed one after another; for
    any other rule each value follows a 64 bit value index. Sample types that
    can not be expressed as a single number give an empty list.
    """
    value_format = _VALUE_FORMATS.get(sample_type)
    if value_format is None:
        return []
    if count < 0:
        raise ValueError("count must not be negative")
    if rule_type is RuleType.EXPLICIT:
        record = struct.Struct("<" + value_format)
    else:
        record = struct.Struct("<" + _VALUE_INDEX_FORMAT + value_format)
    needed = record.size * count
    view = memoryview(data)
    if len(view) < needed:
        raise ValueError(f"{count} values need {needed} bytes, only {len(view)} given")
    return [float(fields[-1]) for fields in record.iter_unpack(view[:needed])]