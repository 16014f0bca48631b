# gnsslocutils

Building blocks for a GNSS location stack, written as a plain Python library
with no third-party dependencies.

## Modules

- `gnsslocutils.nmea`: builds `$GPGSA`, `$GPVTG`, `$GPRMC` and `$GPGGA`
  sentences from a position report with `generate_pos`. It takes a
  `NmeaState`, a `GpsLocation` and an optional `LocationExtended`.
  `put_checksum` appends `*XX\r\n` to a sentence body, and
  `blank_fix_sentences` returns the four sentences that report no fix.
- `gnsslocutils.nmea_sv`: builds `$GPGSV` and `$GLGSV` sentences from an
  `SvStatus` (a list of `SvInfo`) with `generate_sv`. It also caches the
  used-in-fix mask and the DOP values in the `NmeaState` for the next
  position report.
- `gnsslocutils.linked_list`: `LinkedList`. `add` puts an item at the head
  and `remove` takes one from the tail. It also has `flush`, which calls each
  item's dealloc, and `search`. Failures raise `LinkedListError`, which
  carries a `LinkedListStatus`.
- `gnsslocutils.msg_q`: `MessageQueue`, a blocking, thread-safe FIFO with
  `send`, `receive`, `flush`, `unblock` and `close`. It can be used as a
  context manager. `unblock` wakes every waiting receiver, and from then on
  the queue refuses sends and receives. Failures raise `MsgQueueError`, which
  carries a `MsgQueueStatus`.
- `gnsslocutils.loc_timer`: one-shot timers. `loc_timer_start(msec, callback,
  user_data)` returns a `LocTimer`. The timer calls
  `callback(user_data, errno.ETIMEDOUT)` on expiry unless `stop` was called
  first. `join` waits for the timer thread.
- `gnsslocutils.loc_cfg`: `read_conf(path, table)` reads `NAME = value` lines
  into `ConfigParam` entries. Each entry has a `ParamType` of number, float or
  string. Values starting with `0x` are read as hexadecimal. The file's
  `DEBUG_LEVEL` and `TIMESTAMP` also configure the shared logger.
- `gnsslocutils.log_util`: `LocLogger` and the shared `loc_logger`. Messages
  are filtered by a debug level: 0xff means "not configured", and 1 to 5 is a
  verbosity threshold. Messages are emitted through the standard `logging`
  module under the name `gnsslocutils`.
- `gnsslocutils.loc_log`: lookups from value to name (`get_name_from_val`,
  `get_name_from_mask`, `get_msg_q_status`, `get_target_name`) and the
  `get_time` time string.
- `gnsslocutils.loc_target`: target codes (`GnssTarget`, `SscType`,
  `target_set`). `detect_target` works out the target from a property getter
  and SoC files found under a root directory.
- `gnsslocutils.platform_time`: `system_time_us` and
  `elapsed_millis_since_boot`, both taken from the wall clock.
- `gnsslocutils.lights`: `LightsDevice` writes LCD, button and RGB indicator
  LED values to sysfs-style files under a root directory. `duty_pattern`
  computes the blink duty-cycle string.
- `gnsslocutils.device`: `init_msm_properties` fills product properties into
  a mapping, choosing the model from the SoC raw id. `wlan_address_from_nv`
  and `format_mac` handle a WLAN MAC address that is stored byte-reversed.

## Installing

```
pip install .
```

Run the tests with:

```
pip install .[test]
pytest
```

## Examples

```python
from gnsslocutils.nmea import GpsLocation, NmeaState, generate_pos

state = NmeaState()
location = GpsLocation(timestamp=1_400_000_000_000, latitude=48.1, longitude=11.5)
for sentence in generate_pos(state, location):
    print(sentence, end="")
```

```python
from gnsslocutils.msg_q import MessageQueue

with MessageQueue() as queue:
    queue.send("hello", None)
    print(queue.receive())
```

```python
from gnsslocutils.loc_cfg import ConfigParam, ParamType, read_conf

table = [ConfigParam("INTERMEDIATE_POS", ParamType.NUMBER)]
read_conf("gps.conf", table)
print(table[0].value, table[0].is_set)
```

## What this package does not do

It does not talk to a GNSS receiver or modem. It does not run a location
service, and it has no command-line tool. NMEA sentences are only returned,
or handed to the `send` callable you supply. Target detection and the lights
use only the files under the root directory you pass and the property getter
you supply. They do not touch system property services on their own.