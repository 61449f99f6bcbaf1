# xenocontrol

Building blocks for a game controller companion tool:

- recognising controllers by USB vendor id (Xbox, PlayStation, Switch, BETOP),
- keeping a list of supported devices in a TOML file and matching connected
  HID devices against it,
- tracking the selected controller and whether it connected, switched or
  disconnected between polls,
- turning XInput readings into normalised stick, trigger and button data,
- averaging samples to measure stick drift,
- picking an adaptive sampling rate for a polling frequency,
- storing application settings and button-to-shortcut mappings as TOML.

## Installation

```
pip install xenocontrol
```

To run the tests:

```
pip install "xenocontrol[test]"
pytest
```

## Configuration directory

All files live in an `xc_datas` directory under the application root. The
root is taken from the `XENOCONTROL_ROOT` environment variable when it is set,
otherwise it is the directory of the running program (`sys.argv[0]`), falling
back to the current directory. Three files are used:

- `settings.toml` – application settings,
- `supported_devices.toml` – the supported-device list,
- `mappings.toml` – button mappings.

Each is created with defaults the first time it is loaded.

## Command line

```
xenocontrol [init|settings|devices|mappings|platform] [-v]
```

The command creates the configuration directory, loads (and if needed
creates) the settings, supported-device and mapping files, and prints JSON:

- `init` (the default): title, platform, configuration directory and the
  number of supported devices and mappings,
- `settings`: the current settings,
- `devices`: the supported-device list,
- `mappings`: the stored mappings,
- `platform`: the operating system name (`linux`, `windows`, `macos`, ...).

`-v` / `--verbose` turns on debug logging. If the configuration directory
already exists, the line `Config dir already exists` is printed before the
JSON.

## Library

### Sampling rates

```python
from xenocontrol.adaptive_sampler import AdaptiveSampler

sampler = AdaptiveSampler(200_000.0, 10.0)
rate = sampler.compute_sampling_rate(125.0)
```

The safety factor is 10 between 1 Hz and 100 Hz, larger below and smaller
(never under 4) above; the result is at least twice the signal frequency and
clamped to the sampler's limits. `set_base_safety_factor` and
`set_frequency_thresholds` adjust it.

### Controller data

```python
from xenocontrol.datas import ControllerButtons, ControllerDatas

data = ControllerDatas()
data.set_button(ControllerButtons.A, True)
assert data.button_is_pressed(ControllerButtons.A)
data.to_dict()
```

Buttons are bits of `ControllerDatas.buttons`, numbered as in
`ControllerButtons`.

### Devices and shared state

```python
from xenocontrol.devices import (
    ControllerState, ControllerType, HidDevice, SUPPORTED_DEVICES_FILE,
    ConnectionTracker, detect_controller_type, list_supported_connected_devices,
    load_or_create_config,
)

assert detect_controller_type("045E") is ControllerType.XBOX

config = load_or_create_config(SUPPORTED_DEVICES_FILE)
found = list_supported_connected_devices(
    config, [HidDevice(0x045E, 0x0B12, "Xbox Controller", "/dev/hidraw0")]
)

state = ControllerState()
state.set_frequency(250)          # clamped to 1–8000 Hz
state.use_device("Xbox Controller", found)

tracker = ConnectionTracker()
tracker.update(state.current_device)   # ConnectionEvent.CONNECTED
```

`disconnect_device` resets the selection to the first default entry, which
has no device path. `get_controller_data` returns a copy of the latest sample.

### Xbox readings

```python
from xenocontrol.xbox import XInputState, poll_xbox_controller

poll_xbox_controller(state, lambda: XInputState(south_button=True, left_trigger=200))
```

`read_state` returns an `XInputState`, or `None` / raises `OSError` when the
pad is gone, in which case the device is disconnected and `None` is returned.
Sticks are normalised from -32768..32767 to -1..1; a trigger counts as pressed
above 30.

### Normalising and drift sampling

```python
from xenocontrol.logic import normalize, controller_stick_drift_sampling

normalize(32767, -32768, 32767, -1.0, 1.0)  # 1.0
```

`normalize` raises `ValueError` for an empty source range.
`await controller_stick_drift_sampling(state)` waits 1.1 s, then reads
`state`'s controller data every millisecond for 3 s (both adjustable) and
returns the rounded average; the polling interval is shortened meanwhile and
restored afterwards.

### Settings and mappings

```python
from xenocontrol.settings import load_settings, update_settings
from xenocontrol.mapping import Mapping, MappingStore, MappingType

settings = load_settings()
settings.polling_frequency = 500
update_settings(settings)

store = MappingStore()
store.set_mappings([Mapping(1, "A+B", "Ctrl+C", MappingType.KEYBOARD)])
store.get_mappings()
```

`update_settings` raises `SettingsError` when the polling frequency is outside
1–8000 Hz or the deadzone is above 30%. A settings or mappings file that
cannot be parsed is reported in the log; settings then fall back to defaults
and mappings keep what was loaded before.

## What it does not do

- There is no window, tray icon or other user interface; the command only
  prints JSON.
- It does not enumerate HID devices or read XInput itself: the caller passes
  `HidDevice` entries and a `read_state` function.
- No background polling loops are started.
- `update_settings` stores `auto_start` but does not register the program to
  start with the system.
- `open_url` only checks a URL and returns it; it does not open a browser.
- Mappings are stored, not applied to keyboard or controller input.