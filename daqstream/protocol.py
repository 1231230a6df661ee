"""Core enumerations, units, time resolutions and protocol constants."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar

# Data type names used in signal definitions.
DATA_TYPE_INT8 = "int8"
DATA_TYPE_UINT8 = "uint8"
DATA_TYPE_INT16 = "int16"
DATA_TYPE_UINT16 = "uint16"
DATA_TYPE_INT32 = "int32"
DATA_TYPE_UINT32 = "uint32"
DATA_TYPE_INT64 = "int64"
DATA_TYPE_UINT64 = "uint64"
DATA_TYPE_REAL32 = "real32"
DATA_TYPE_REAL64 = "real64"
DATA_TYPE_COMPLEX32 = "complex32"
DATA_TYPE_COMPLEX64 = "complex64"
DATA_TYPE_BITFIELD = "bitField"
DATA_TYPE_ARRAY = "array"
DATA_TYPE_DYNAMIC_ARRAY = "dynamicArray"
DATA_TYPE_STRUCT = "struct"

# Error codes from the JSON-RPC specification.
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Member names from the JSON-RPC specification.
JSONRPC = "jsonrpc"
METHOD = "method"
RESULT = "result"
ERROR = "error"
CODE = "code"
MESSAGE = "message"
DATA = "data"
PARAMS = "params"
ID = "id"


class SampleType(Enum):
    """Kind of value carried by a signal."""

    UNKNOWN = auto()
    S8 = auto()
    S16 = auto()
    S32 = auto()
    S64 = auto()
    U8 = auto()
    U16 = auto()
    U32 = auto()
    U64 = auto()
    REAL32 = auto()
    REAL64 = auto()
    COMPLEX32 = auto()
    COMPLEX64 = auto()
    BITFIELD32 = auto()
    BITFIELD64 = auto()
    ARRAY = auto()
    STRUCT = auto()


class RuleType(Enum):
    """How the values of a signal advance in time."""

    UNKNOWN = auto()
    EXPLICIT = auto()
    LINEAR = auto()
    CONSTANT = auto()


@dataclass
class Unit:
    """Unit of a signal: numeric id, display name and physical quantity."""

    UNIT_ID_USER: ClassVar[int] = 0
    UNIT_ID_NONE: ClassVar[int] = -1
    UNIT_ID_SECONDS: ClassVar[int] = 5457219
    UNIT_ID_MILLI_SECONDS: ClassVar[int] = 4403766

    unit_id: int = -1
    display_name: str = ""
    quantity: str = ""


@dataclass(frozen=True)
class TimeResolution:
    """Time between two ticks expressed as numerator / denominator seconds."""

    ONE_HZ: ClassVar[TimeResolution]
    FAMILY_1GHZ: ClassVar[TimeResolution]
    FAMILY_NTP: ClassVar[TimeResolution]

    numerator: int
    denominator: int

    @property
    def frequency(self) -> int:
        """Ticks per second."""
        return self.denominator // self.numerator


TimeResolution.ONE_HZ = TimeResolution(1, 1)
TimeResolution.FAMILY_1GHZ = TimeResolution(1, 1_000_000_000)
TimeResolution.FAMILY_NTP = TimeResolution(1, 1 << 32)


_SCALAR_DATA_TYPES = {
    SampleType.S8: DATA_TYPE_INT8,
    SampleType.U8: DATA_TYPE_UINT8,
    SampleType.S16: DATA_TYPE_INT16,
    SampleType.U16: DATA_TYPE_UINT16,
    SampleType.S32: DATA_TYPE_INT32,
    SampleType.U32: DATA_TYPE_UINT32,
    SampleType.S64: DATA_TYPE_INT64,
    SampleType.U64: DATA_TYPE_UINT64,
    SampleType.REAL32: DATA_TYPE_REAL32,
    SampleType.REAL64: DATA_TYPE_REAL64,
    SampleType.COMPLEX32: DATA_TYPE_COMPLEX32,
    SampleType.COMPLEX64: DATA_TYPE_COMPLEX64,
}


def data_type_for_sample_type(sample_type: SampleType) -> str:
    """Return the data type name of a scalar or complex sample type.

    Raises ValueError for sample types that have no plain member description.
    """
    try:
        return _SCALAR_DATA_TYPES[sample_type]
    except KeyError:
        raise ValueError(f"no member data type for {sample_type.name}") from None