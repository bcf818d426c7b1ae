# lora_igate

Building blocks for a LoRa APRS iGate, in plain Python with no third-party
dependencies.

| Module | What it holds |
| --- | --- |
| `lora_igate.timer` | `Timer`, a millisecond timeout that can be started, checked and reset |
| `lora_igate.task_queue` | `TaskQueue`, a first-in first-out queue of work items |
| `lora_igate.timelib` | `break_time`, `make_time`, `TimeElements`, month and day names, `TimeStatus` and `SystemClock`, a software clock that can be synchronised from a time provider |
| `lora_igate.font` | `FontDesc`, a proportional 1-bit bitmap font description |
| `lora_igate.bitmap` | `Bitmap`, a 1-bit page-ordered frame buffer with lines, rectangles, circles, progress bars and text |
| `lora_igate.oled_display` | `Geometry` and `OLEDDisplay`, the command set shared by SSD1306-style panels |
| `lora_igate.ssd1306` | `SSD1306`, a panel that sends commands and frame data over an I2C-like bus |
| `lora_igate.display` | `Display`, `DisplayFrame` and `TextFrame`: a frame queue with a status page and a screen-saver timeout |
| `lora_igate.task_manager` | `Task`, `TaskDisplayState`, `TaskManager` and `StatusFrame` for cooperative scheduling |
| `lora_igate.system` | `System`, the object tasks share |
| `lora_igate.board_finder` | `BoardType`, `BoardConfig`, the known board layouts, `BoardProbe` and `BoardFinder` |
| `lora_igate.lora` | `LoRa`, a register-level driver for SX127x radios |
| `lora_igate.lora_aprs` | `LoRaAPRS`, APRS packet framing on top of `LoRa` |
| `lora_igate.ntp_client` | `NTPClient`, an SNTP client over UDP |
| `lora_igate.aprs_is` | `APRSIS`, a TCP client for the APRS-IS network |
| `lora_igate.configuration` | `ConfigurationManagement`, a configuration stored as a JSON file |

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Examples

### Timers

```python
from lora_igate.timer import Timer

frame_rate = Timer()
frame_rate.set_timeout(500)
frame_rate.start()

if frame_rate.check():
    ...  # 500 ms have passed
    frame_rate.start()
```

`Timer` takes an optional clock returning milliseconds, which makes it easy
to drive in tests.

### Calendar arithmetic

```python
from lora_igate.timelib import break_time, make_time, month_str, day_short_str

elements = break_time(1_000_000_000)
assert make_time(elements) == 1_000_000_000
print(month_str(elements.month), day_short_str(elements.wday))   # "September Sun"
```

`SystemClock` counts forward from the last `set_time` and, once the sync
interval has passed, asks a provider registered with `set_sync_provider`
for a fresh value. `time_status` returns a `TimeStatus`: `NOT_SET`,
`NEEDS_SYNC` or `SET`.

### Drawing

```python
from lora_igate.bitmap import Bitmap

bitmap = Bitmap(128, 64)
bitmap.draw_rect(0, 0, 128, 64)
bitmap.draw_progress_bar(4, 40, 100, 10, 75)
```

Text drawing (`draw_char`, `draw_string`, `draw_string_lf`) needs a
`FontDesc`, given to the `Bitmap` constructor or set on its `font`
attribute; without one these methods raise `ValueError`.

An `SSD1306` is built on any object with a `write(address, payload)` method
and initialises the panel when created. `Display.setup` attaches such a
panel; `Display.update` then shows queued frames one after another, falls
back to its status frame when the queue is empty, and switches the panel
off after the save timeout once `activate_display_save_mode` has been
called.

### Cooperative tasks

Subclass `Task`, implement `setup` and `loop`, and register instances with
a `TaskManager`. Tasks added with `add_always_run_task` run on every pass;
the others take turns, one per call of `TaskManager.loop`. `StatusFrame`
draws one line per task with its state.

### Radio

`LoRa` talks to an SX127x chip through a register transport: an object
with `begin()`, `end()` and `transfer(address, value)`. `begin` raises
`ModemNotFoundError` when the chip does not report the expected version.
`LoRaAPRS` wraps it: `check_message` reads a received packet and keeps it
(in `message`) when it carries the APRS header, and `send_message`
transmits on the TX frequency before returning to the RX frequency set with
`set_rx_frequency`.

### Network time

```python
from lora_igate.ntp_client import NTPClient

ntp = NTPClient()
if ntp.update():
    print(ntp.formatted_time())
ntp.end()
```

### APRS-IS

```python
from lora_igate.aprs_is import APRSIS, LoginError

client = APRSIS()
client.setup("N0CALL", "placeholder", "lora_igate", "0.1.0")
try:
    client.connect("rotate.aprs2.net", 14580, "r/48.0/14.0/50")
    client.send_message("N0CALL>APRS:>online")
    line = client.get_message()
except LoginError:
    print("passcode not accepted")
except ConnectionError:
    print("server not reachable")
finally:
    client.close()
```

`connect` sends the login line and waits for the server's `logresp`. It
raises `ConnectionError` when the server cannot be reached and
`LoginError` when it reports the user as unverified. `get_message` returns
`None` when nothing is waiting or the line is a server comment.

### Configuration

Subclass `ConfigurationManagement` and implement
`_read_project_configuration(data, conf)` and
`_write_project_configuration(conf)`. `read_configuration` loads the JSON
file and writes it back so that new fields are stored; a missing file
leaves the configuration unchanged.

## What the package does not do

- It has no command or main program; it is a library to build an iGate from.
- It ships no fonts; text drawing needs a `FontDesc` you provide.
- It does not decode APRS frames; `LoRaAPRS` and `APRSIS` return the raw
  text unless a `decoder` callable is given.
- It has no hardware drivers for buses or pins: the I2C bus for `SSD1306`,
  the register transport for `LoRa` and the `BoardProbe` for
  `BoardFinder` must be supplied, and there is no power management chip
  support.