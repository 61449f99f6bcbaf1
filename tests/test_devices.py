import pytest

from xenocontrol.config_files import get_config_path, read_toml_file, write_toml_file
from xenocontrol.datas import ControllerButtons
from xenocontrol.devices import (
    SUPPORTED_DEVICES_FILE,
    UNKNOWN_DEVICE_NAME,
    ConnectionEvent,
    ConnectionTracker,
    ControllerState,
    ControllerType,
    DeviceInfo,
    HidDevice,
    default_devices,
    detect_controller_type,
    device_from_dict,
    list_supported_connected_devices,
    load_or_create_config,
)


@pytest.fixture
def app_root(tmp_path, monkeypatch):
    monkeypatch.setenv("XENOCONTROL_ROOT", str(tmp_path))
    return tmp_path


@pytest.mark.parametrize(
    "vid, expected",
    [
        ("045e", ControllerType.XBOX),
        ("045E", ControllerType.XBOX),
        ("054c", ControllerType.PLAYSTATION),
        ("057e", ControllerType.SWITCH),
        ("20bc", ControllerType.BETOP),
        ("20BC", ControllerType.BETOP),
        ("1234", ControllerType.OTHER),
        ("", ControllerType.OTHER),
    ],
)
def test_detect_controller_type(vid, expected):
    assert detect_controller_type(vid) is expected


def test_default_devices_contents():
    devices = default_devices()
    assert len(devices) == 5
    assert devices[0].name == "Any Xbox Controller"
    assert devices[0].vendor_id == "045e"
    assert devices[0].controller_type is ControllerType.XBOX
    betop = devices[-1]
    assert betop.name == "[ BETOP CONTROLLER ]"
    assert betop.product_id == "1263"
    assert betop.controller_type is ControllerType.OTHER
    assert all(d.device_path is None for d in devices)


def test_to_dict_round_trip():
    device = DeviceInfo("Pad", "054c", "09cc", "/dev/hidraw0", ControllerType.PLAYSTATION)
    assert device_from_dict(device.to_dict()) == device


def test_to_dict_omits_unset_fields():
    data = DeviceInfo("Pad", "045e").to_dict()
    assert "product_id" not in data
    assert "device_path" not in data
    assert data["controller_type"] == "Other"
    assert device_from_dict(data) == DeviceInfo("Pad", "045e")


def test_device_from_dict_rejects_unknown_type():
    with pytest.raises(ValueError):
        device_from_dict({"name": "x", "vendor_id": "045e", "controller_type": "Nope"})


def test_device_from_dict_requires_name():
    with pytest.raises(KeyError):
        device_from_dict({"vendor_id": "045e", "controller_type": "Xbox"})


def test_load_or_create_config_creates_defaults(app_root):
    devices = load_or_create_config(SUPPORTED_DEVICES_FILE)
    assert devices == default_devices()
    path = get_config_path(SUPPORTED_DEVICES_FILE)
    assert path.exists()
    written = read_toml_file(path)
    assert [entry["name"] for entry in written["devices"]] == [d.name for d in devices]


def test_load_or_create_config_redetects_types(app_root):
    load_or_create_config(SUPPORTED_DEVICES_FILE)
    reloaded = load_or_create_config(SUPPORTED_DEVICES_FILE)
    assert [d.name for d in reloaded] == [d.name for d in default_devices()]
    assert reloaded[-1].controller_type is ControllerType.BETOP
    assert reloaded[0].controller_type is ControllerType.XBOX


def test_load_or_create_config_reads_custom_file(app_root):
    path = get_config_path("custom.toml")
    path.parent.mkdir(parents=True, exist_ok=True)
    write_toml_file(
        path,
        {"devices": [{"name": "Switch", "vendor_id": "057E", "controller_type": "Other"}]},
    )
    devices = load_or_create_config("custom.toml")
    assert devices == [DeviceInfo("Switch", "057E", None, None, ControllerType.SWITCH)]


def test_load_or_create_config_falls_back_on_bad_file(app_root):
    path = get_config_path("broken.toml")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("devices = [ not toml", encoding="utf-8")
    assert load_or_create_config("broken.toml") == default_devices()


def test_load_or_create_config_falls_back_on_missing_field(app_root):
    path = get_config_path("partial.toml")
    path.parent.mkdir(parents=True, exist_ok=True)
    write_toml_file(path, {"devices": [{"name": "no vendor"}]})
    assert load_or_create_config("partial.toml") == default_devices()


def test_list_supported_matches_vendor():
    hid = [HidDevice(0x045E, 0x028E, "Xbox Controller", "path-1")]
    found = list_supported_connected_devices(default_devices(), hid)
    assert found == [
        DeviceInfo("Xbox Controller", "045e", "028e", "path-1", ControllerType.XBOX)
    ]


def test_list_supported_respects_product_filter():
    config = [DeviceInfo("Betop", "20bc", "1263")]
    hid = [
        HidDevice(0x20BC, 0x1263, "Betop Pad", "path-a"),
        HidDevice(0x20BC, 0x0001, "Other Betop", "path-b"),
        HidDevice(0x1234, 0x1263, "Stranger", "path-c"),
    ]
    found = list_supported_connected_devices(config, hid)
    assert [d.device_path for d in found] == ["path-a"]
    assert found[0].controller_type is ControllerType.BETOP


def test_list_supported_unknown_name():
    hid = [HidDevice(0x057E, 0x2009, None, "path-x")]
    found = list_supported_connected_devices(default_devices(), hid)
    assert [d.name for d in found] == [UNKNOWN_DEVICE_NAME]


def test_list_supported_empty_when_nothing_matches():
    hid = [HidDevice(0x1111, 0x2222, "x", "p")]
    assert list_supported_connected_devices(default_devices(), hid) == []


def test_tracker_sequence():
    tracker = ConnectionTracker()
    first = DeviceInfo("A", "045e", "028e", "p1", ControllerType.XBOX)
    second = DeviceInfo("B", "045e", "028e", "p2", ControllerType.XBOX)

    assert tracker.update(DeviceInfo()) is ConnectionEvent.UNCHANGED
    assert tracker.last_device is None

    assert tracker.update(first) is ConnectionEvent.CONNECTED
    assert tracker.last_device == first

    assert tracker.update(first) is ConnectionEvent.UNCHANGED
    assert tracker.update(second) is ConnectionEvent.SWITCHED
    assert tracker.last_device == second

    assert tracker.update(default_devices()[0]) is ConnectionEvent.DISCONNECTED
    assert tracker.last_device is None


def test_tracker_same_path_keeps_old_device():
    tracker = ConnectionTracker()
    tracker.update(DeviceInfo("A", "045e", None, "p1"))
    assert tracker.update(DeviceInfo("Renamed", "045e", None, "p1")) is ConnectionEvent.UNCHANGED
    assert tracker.last_device.name == "A"


def test_state_defaults():
    state = ControllerState()
    assert state.freq == 125
    assert state.sampling_rate == 1000.0
    assert state.time_interval == 1.0
    assert state.current_device.device_path is None


@pytest.mark.parametrize("requested, expected", [(0, 1), (125, 125), (10000, 8000)])
def test_set_frequency_clamps(requested, expected):
    state = ControllerState()
    state.set_frequency(requested)
    assert state.freq == expected
    assert state.time_interval == pytest.approx(1.0 / expected)
    assert state.sampling_rate == state.sampler.compute_sampling_rate(float(expected))


def test_sampling_rate_within_sampler_bounds():
    state = ControllerState()
    for freq in (1, 50, 500, 8000):
        state.set_frequency(freq)
        assert state.sampler.min_sampling_rate <= state.sampling_rate
        assert state.sampling_rate <= state.sampler.max_sampling_rate
        assert state.sampling_rate >= 2 * freq


def test_use_device_and_disconnect():
    state = ControllerState()
    devices = [DeviceInfo("Pad", "045e", "028e", "p1", ControllerType.XBOX)]
    assert state.use_device("Missing", devices) is False
    assert state.current_device.name == ""

    assert state.use_device("Pad", devices) is True
    assert state.current_device == devices[0]

    assert state.disconnect_device() is True
    assert state.current_device == default_devices()[0]
    assert state.current_device.device_path is None


def test_get_controller_data_is_a_copy():
    state = ControllerState()
    snapshot = state.get_controller_data()
    snapshot.set_button(ControllerButtons.A, True)
    snapshot.left_stick.x = 0.5
    assert state.controller_data.buttons == 0
    assert state.controller_data.left_stick.x == 0.0
    state.controller_data.set_button(ControllerButtons.B, True)
    assert state.get_controller_data().get_button(ControllerButtons.B) is True