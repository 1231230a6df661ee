"""Consumer side view of one subscribed signal: meta information and measured data."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from daqstream.datatypes import (
    UnsupportedDataTypeError,
    data_type_size,
    interpret_values_as_double,
    sample_type_for_definition,
)
from daqstream.protocol import (
    DATA_TYPE_ARRAY,
    DATA_TYPE_BITFIELD,
    DATA_TYPE_STRUCT,
    RuleType,
    SampleType,
    Unit,
)

META_METHOD_SUBSCRIBE = "subscribe"
META_METHOD_SIGNAL = "signal"
META_SIGNALID = "signalId"
META_TABLEID = "tableId"
META_DEFINITION = "definition"
META_INTERPRETATION = "interpretation"
META_RULE = "rule"
META_RULETYPE_LINEAR = "linear"
META_RULETYPE_EXPLICIT = "explicit"
META_RULETYPE_CONSTANT = "constant"
META_DELTA = "delta"
META_DATATYPE = "dataType"
META_NAME = "name"
META_UNIT = "unit"
META_UNIT_ID = "unitId"
META_DISPLAY_NAME = "displayName"
META_QUANTITY = "quantity"
META_TIME = "time"
META_RESOLUTION = "resolution"
META_NUMERATOR = "num"
META_DENOMINATOR = "denom"
META_RELATEDSIGNALS = "relatedSignals"

_UINT64_MASK = (1 << 64) - 1
_VALUE_INDEX_SIZE = 8

_RULES = {
    META_RULETYPE_LINEAR: RuleType.LINEAR,
    META_RULETYPE_EXPLICIT: RuleType.EXPLICIT,
    META_RULETYPE_CONSTANT: RuleType.CONSTANT,
}

RawCallback = Callable[["SubscribedSignal", int, bytes], None]
ValuesCallback = Callable[["SubscribedSignal", int, bytes, int], None]


class MetaInformationError(ValueError):
    """Signal meta information is missing, malformed or not supported."""


class DataProcessingError(ValueError):
    """Measured data can not be processed with the time rule of its time signal."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _id_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if _is_number(value):
        return json.dumps(value)
    return None


def _require(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    if isinstance(value, bool) and kind is not bool or not isinstance(value, kind):
        raise MetaInformationError(f"{what} has an invalid type: {value!r}")
    return value


class SubscribedSignal:
    """Interprets and keeps the meta information of a subscribed signal and
    delivers its measured data."""

    def __init__(self, signal_number: int, logger: logging.Logger | None = None) -> None:
        self._signal_number = signal_number
        self._signal_id = ""
        self._table_id = ""
        self._is_time_signal = False
        self._datatype_details: Any = None
        self._data_value_type = SampleType.UNKNOWN
        # never zero, it divides the payload size
        self._data_value_size = 4
        self._rule_type = RuleType.EXPLICIT
        self._member_name = ""
        self._time = 0
        self._linear_delta = 0
        self._time_base_epoch_as_string = ""
        self._time_base_frequency = 0
        self._unit = Unit()
        self._interpretation_object: Any = None
        self._log = logger or logging.getLogger(__name__)

    @property
    def signal_number(self) -> int:
        return self._signal_number

    @property
    def signal_id(self) -> str:
        return self._signal_id

    @property
    def table_id(self) -> str:
        return self._table_id

    @property
    def is_time_signal(self) -> bool:
        return self._is_time_signal

    @property
    def rule_type(self) -> RuleType:
        return self._rule_type

    @property
    def data_value_type(self) -> SampleType:
        return self._data_value_type

    @property
    def data_value_size(self) -> int:
        """Bytes per value of the signal's data type."""
        return self._data_value_size

    @property
    def datatype_details(self) -> Any:
        """Details of a bit field, array or struct data type."""
        return self._datatype_details

    @property
    def member_name(self) -> str:
        return self._member_name

    @property
    def time(self) -> int:
        """Timestamp of the next value of this signal."""
        return self._time

    @property
    def linear_delta(self) -> int:
        """Time delta of a linear rule, 0 when there is none."""
        return self._linear_delta

    @property
    def unit(self) -> Unit:
        return self._unit

    @property
    def unit_display_name(self) -> str:
        return self._unit.display_name

    @property
    def unit_quantity(self) -> str:
        return self._unit.quantity

    @property
    def unit_id(self) -> int:
        return self._unit.unit_id

    @property
    def time_base_epoch_as_string(self) -> str:
        return self._time_base_epoch_as_string

    @property
    def time_base_frequency(self) -> int:
        return self._time_base_frequency

    @property
    def interpretation_object(self) -> Any:
        return copy.deepcopy(self._interpretation_object)

    def set_time(self, timestamp: int) -> None:
        """Set the timestamp used for the next value of this signal."""
        self._time = timestamp & _UINT64_MASK

    def process_measured_data(self, data: bytes, time_signal: SubscribedSignal,
                              on_raw: RawCallback, on_values: ValuesCallback) -> int:
        """Deliver ``data`` to the callbacks, timed by ``time_signal``.

        Returns the number of bytes processed.
        """
        data = bytes(data)
        size = len(data)
        rule = time_signal.rule_type
        if rule is RuleType.LINEAR:
            on_raw(self, time_signal.time, data)
            self._linear_delta = time_signal.linear_delta
            bytes_per_value = self._data_value_size
            if self._rule_type is not RuleType.EXPLICIT:
                bytes_per_value += _VALUE_INDEX_SIZE
            value_count = size // bytes_per_value
            on_values(self, time_signal.time, data, value_count)
            time_signal.set_time(time_signal.time + time_signal.linear_delta * value_count)
        elif rule is RuleType.EXPLICIT:
            # the timestamp arrives before its value, so only one value fits here
            if size != self._data_value_size:
                self._log.error("Only one asynchronous signal value can be handled here")
                return size
            on_raw(self, time_signal.time, data)
            on_values(self, time_signal.time, data, 1)
        elif rule is RuleType.CONSTANT:
            raise DataProcessingError(
                f"Time signal with constant rule is not supported ({self._signal_id})")
        else:
            raise DataProcessingError(f"No rule for signal {self._signal_id}")
        return size

    def process_signal_meta_information(self, method: str, params: Mapping[str, Any]) -> None:
        """Apply signal related meta information; unknown methods are ignored."""
        if not isinstance(params, Mapping):
            raise MetaInformationError("meta information parameters must be an object")
        if method == META_METHOD_SUBSCRIBE:
            if META_SIGNALID not in params:
                raise MetaInformationError("subscribe meta information lacks the signal id")
            signal_id = _id_text(params[META_SIGNALID])
            if signal_id is None:
                raise MetaInformationError("signal id must be a string or a number")
            self._signal_id = signal_id
        elif method == META_METHOD_SIGNAL:
            if META_TABLEID in params:
                table_id = _id_text(params[META_TABLEID])
                if table_id is None:
                    raise MetaInformationError("table id must be a string or a number")
                self._table_id = table_id
            if META_INTERPRETATION in params:
                self._interpretation_object = copy.deepcopy(params[META_INTERPRETATION])
            if META_DEFINITION in params:
                try:
                    self._apply_definition(params[META_DEFINITION], params)
                except MetaInformationError as exc:
                    self._log.error("%s: %s", self._signal_id, exc)
                    raise
                except (KeyError, TypeError, ValueError) as exc:
                    self._log.error("%s: Could not process signal meta information: %s",
                                    self._signal_id, exc)
                    raise MetaInformationError(
                        f"{self._signal_id}: could not process signal meta information: {exc}"
                    ) from exc

    def _apply_definition(self, definition: Any, params: Mapping[str, Any]) -> None:
        if not isinstance(definition, Mapping):
            raise MetaInformationError("signal definition must be an object")
        self._log.info("%s:\n\tSignal definition", self._signal_id)

        linear = definition.get(META_RULETYPE_LINEAR)
        if isinstance(linear, Mapping) and META_DELTA in linear:
            delta = _require(linear[META_DELTA], int, "linear delta")
            self._linear_delta = delta & _UINT64_MASK

        if META_RULE in definition:
            rule_name = _require(definition[META_RULE], str, "rule")
            rule = _RULES.get(rule_name)
            if rule is None:
                raise MetaInformationError(f"unknown rule '{rule_name}'")
            if rule is RuleType.LINEAR and self._linear_delta == 0:
                raise MetaInformationError("time delta of 0 is not allowed for linear rule")
            self._rule_type = rule

        size = data_type_size(definition)
        if size:
            self._data_value_size = size

        if META_NAME in definition:
            self._member_name = _require(definition[META_NAME], str, "member name")
            self._log.info("\tname: %s", self._member_name)

        try:
            sample_type = sample_type_for_definition(definition)
        except UnsupportedDataTypeError as exc:
            raise MetaInformationError(str(exc)) from exc
        if sample_type is not None:
            if sample_type is SampleType.BITFIELD32 or sample_type is SampleType.BITFIELD64:
                self._datatype_details = copy.deepcopy(definition[DATA_TYPE_BITFIELD])
            elif sample_type is SampleType.ARRAY:
                self._datatype_details = copy.deepcopy(definition[DATA_TYPE_ARRAY])
            elif sample_type is SampleType.STRUCT:
                self._datatype_details = copy.deepcopy(definition[DATA_TYPE_STRUCT])
            self._data_value_type = sample_type

        if META_UNIT in definition:
            self._apply_unit(definition[META_UNIT])

        if META_RESOLUTION in definition:
            self._apply_resolution(definition[META_RESOLUTION])

        if self._is_time_signal:
            self._log_time_signal(params)

    def _apply_unit(self, unit: Any) -> None:
        if not isinstance(unit, Mapping):
            raise MetaInformationError("unit must be an object")
        if META_DISPLAY_NAME in unit:
            self._unit.display_name = _require(unit[META_DISPLAY_NAME], str, "unit display name")
        if META_UNIT_ID in unit:
            self._unit.unit_id = _require(unit[META_UNIT_ID], int, "unit id")
        if META_QUANTITY in unit:
            self._unit.quantity = _require(unit[META_QUANTITY], str, "unit quantity")
            if self._unit.quantity == META_TIME:
                self._is_time_signal = True

    def _apply_resolution(self, resolution: Any) -> None:
        if not isinstance(resolution, Mapping):
            raise MetaInformationError("resolution must be an object")
        numerator = _require(resolution[META_NUMERATOR], int, "resolution numerator")
        denominator = _require(resolution[META_DENOMINATOR], int, "resolution denominator")
        if numerator == 0 or denominator == 0:
            raise MetaInformationError("resolution numerator and denominator may not be 0")
        if self._unit.unit_id != Unit.UNIT_ID_SECONDS:
            raise MetaInformationError("for time unit 's' is required")
        self._time_base_frequency = denominator // numerator
        self._log.info("\ttime resolution: %s", json.dumps(dict(resolution)))

    def _log_time_signal(self, params: Mapping[str, Any]) -> None:
        if self._rule_type is RuleType.LINEAR:
            frequency = self._time_base_frequency / self._linear_delta
            self._log.info("\tSynchronous signal (linear time)")
            self._log.info("\t\tLinear delta: %s", self._linear_delta)
            self._log.info("\t\tFrequency: %s Hz", frequency)
        elif self._rule_type is RuleType.EXPLICIT:
            self._log.info("\tAsynchronous signal (Explicit time)")

        if META_RELATEDSIGNALS in params:
            self._log.info("%s:\n\tRelated signals", self._signal_id)
            related = params[META_RELATEDSIGNALS]
            if isinstance(related, list):
                for item in related:
                    if not isinstance(item, Mapping):
                        raise MetaInformationError("related signal must be an object")
                    kind = _require(item["type"], str, "related signal type")
                    signal_id = _require(item["signalId"], str, "related signal id")
                    self._log.info("\t\tsignal id: %s, type: %s", signal_id, kind)

    def interpret_values_as_double(self, data: bytes, count: int) -> list[float]:
        """Convert ``count`` values of ``data`` to floats; empty for unsupported types."""
        return interpret_values_as_double(data, count, self._data_value_type, self._rule_type)