# daqstream

Consumer-side building blocks for a binary signal streaming protocol.

Each signal is described by JSON meta information, and its values arrive in binary packets. `daqstream` reads that meta information into per-signal state. It tracks the time base of each signal, hands measured data to callbacks with the right timestamps, and decodes the values to floats.

## Installation

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install .[test]
pytest
```

## Modules

### `daqstream.protocol`

- `SampleType` lists the kinds of value a signal can carry: signed and unsigned integers, `REAL32`/`REAL64`, complex, 32 and 64 bit bit fields, `ARRAY` and `STRUCT`.
- `RuleType` lists how a signal advances in time: `EXPLICIT`, `LINEAR`, `CONSTANT` or `UNKNOWN`.
- `Unit` is a dataclass with `unit_id`, `display_name` and `quantity`, plus the ids `UNIT_ID_NONE`, `UNIT_ID_USER`, `UNIT_ID_SECONDS` and `UNIT_ID_MILLI_SECONDS`.
- `TimeResolution` holds a `numerator` and a `denominator`. Its `frequency` property gives ticks per second. Predefined values are `ONE_HZ`, `FAMILY_1GHZ` and `FAMILY_NTP` (2**32 ticks per second).
- `data_type_for_sample_type(sample_type)` returns the data type name of a scalar or complex sample type, such as `"int16"`. It raises `ValueError` for any other sample type.
- The module also defines the data type name constants (`DATA_TYPE_*`) and the JSON-RPC member names and error codes.

### `daqstream.datatypes`

- `data_type_size(definition)` gives the byte size of one value of a definition. Bit fields, fixed-size arrays and structs are resolved recursively. The result is 0 when the definition has no data type or names a type without a fixed size.
- `sample_type_for_definition(definition)` maps a definition to a `SampleType`. It returns `None` when the definition names no data type.
- `interpret_values_as_double(data, count, sample_type, rule_type)` decodes little-endian values to floats.
  - With an explicit rule, values are packed back to back.
  - With any other rule, each value is preceded by a 64 bit value index.
  - Complex, array and struct types give an empty list.
  - It raises `ValueError` when `data` is too short.
- `UnsupportedDataTypeError` (a `ValueError`) is raised in these cases:
  - the definition is malformed;
  - the data type is unknown;
  - the data type is `dynamicArray`;
  - a bit field has a base type other than `uint32` or `uint64`.

### `daqstream.subscribed_signal`

`SubscribedSignal(signal_number, logger=None)` holds the state of one subscribed signal. Its read-only properties include:

- `signal_id`, `table_id`, `rule_type` and `data_value_type`;
- `data_value_size`, `member_name`, `is_time_signal`, `time` and `linear_delta`;
- `unit_id`, `unit_display_name`, `unit_quantity` and `time_base_frequency`;
- `interpretation_object` and `datatype_details`.

Its methods:

- `process_signal_meta_information(method, params)`
  - For `"subscribe"`, it reads the signal id, which may be a string or a number.
  - For `"signal"`, it reads the table id, the interpretation object and the definition. The definition carries the rule, linear delta, data type, name, unit and resolution.
  - Other methods are ignored.
  - Invalid or unsupported meta information raises `MetaInformationError`. Examples are a linear rule with a delta of 0, an unknown rule, or a resolution that is not in seconds.
- `process_measured_data(data, time_signal, on_raw, on_values)` delivers a packet to `on_raw(signal, timestamp, raw)` and `on_values(signal, timestamp, raw, value_count)`, then returns the number of bytes processed. What happens depends on the time signal's rule:
  - **Linear:** the time signal's time is advanced by `delta * value_count`.
  - **Explicit:** exactly one value is expected. A packet of any other size is logged as an error and skipped.
  - **Constant or unknown:** `DataProcessingError` is raised.
- `interpret_values_as_double(data, count)` decodes values using the signal's own sample type and rule.
- `set_time(timestamp)` sets the timestamp of the next value.

### `daqstream.factorization`

Prime factor helpers for time resolutions:

- `get_factor_for_factorization(number)` returns the factor that makes `number` a whole number greater than 1, or 0 for 0.
- `prime_factor_exponents(value)` returns a dict mapping each prime to its exponent. It is empty for 0 and 1.
- `compose_prime_factor_exponents(exponents)` returns a JSON-ready dict keyed by the primes as text.
- `product(exponents)` multiplies the factors out, and returns 0.0 for an empty mapping.
- `change_signs(exponents)` negates every exponent, turning a frequency into a period and back.

### `daqstream.durations`

`duration_from_string(text, default)` parses strings such as `"10ms"` into nanoseconds. The units `s`, `ms`, `µs` and `ns` are recognised. It returns `default` when the text cannot be read or the unit is unknown.

## Example

```python
import struct

from daqstream.subscribed_signal import SubscribedSignal

time_signal = SubscribedSignal(10)
time_signal.process_signal_meta_information("subscribe", {"signalId": "time"})
time_signal.process_signal_meta_information(
    "signal",
    {"definition": {"rule": "linear", "linear": {"delta": 1}, "dataType": "uint64"}},
)
time_signal.set_time(1000)

data_signal = SubscribedSignal(9)
data_signal.process_signal_meta_information("subscribe", {"signalId": "data"})
data_signal.process_signal_meta_information(
    "signal", {"definition": {"rule": "explicit", "dataType": "uint16"}}
)

def on_raw(signal, timestamp, raw):
    print(signal.signal_id, timestamp, len(raw), "bytes")   # data 1000 6 bytes

def on_values(signal, timestamp, raw, count):
    print(signal.interpret_values_as_double(raw, count))    # [1.0, 2.0, 3.0]

data_signal.process_measured_data(
    struct.pack("<3H", 1, 2, 3), time_signal, on_raw, on_values
)
print(time_signal.time)                                     # 1003
```

## What this package does not do

`daqstream` works on meta information and payloads that have already been separated out. It does not:

- open network or file streams, or parse packet headers;
- subscribe to signals on a server;
- produce or write signal data;
- generate test signals.

It provides no command-line tools.