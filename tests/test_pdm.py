import json

import pytest

from mediaindex.pdm import DeviceType, PdmDevice, PdmListener, PdmObserver


class Recorder(PdmObserver):
    def __init__(self):
        self.events = []

    def pdm_update(self, dev, available):
        self.events.append((dev["storageDriveList"][0]["mountName"], available))


def make_dev(mount, device_type="USB_STORAGE"):
    return {
        "deviceType": device_type,
        "storageDriveList": [{"mountName": mount}],
    }


def payload(*devs):
    return json.dumps({"storageDeviceList": list(devs)})


def test_device_types():
    assert PdmDevice("/m/a", make_dev("/m/a")).type is DeviceType.USB
    assert PdmDevice("/m/b", make_dev("/m/b", "MTP")).type is DeviceType.MTP
    assert PdmDevice("/m/c", make_dev("/m/c", "OTHER")).type is DeviceType.UNSUPPORTED
    assert PdmDevice("/m/d", {}).type is DeviceType.UNSUPPORTED


def test_device_copies_description_and_dirty_flag():
    dev = make_dev("/m/a")
    device = PdmDevice("/m/a", dev)
    dev["storageDriveList"][0]["mountName"] = "changed"
    assert device.dev["storageDriveList"][0]["mountName"] == "/m/a"
    assert device.mount_name == "/m/a"
    assert device.dirty is False
    device.mark_dirty(True)
    assert device.dirty is True


def test_abstract_observer_cannot_be_created():
    with pytest.raises(TypeError):
        PdmObserver()


def test_invalid_json_is_rejected():
    listener = PdmListener()
    assert listener.on_device_notification("{not json") is False


def test_subscribe_called_once():
    calls = []
    listener = PdmListener(subscribe=lambda: calls.append(1))
    listener.set_device_notifications(Recorder(), DeviceType.USB, True)
    listener.set_device_notifications(Recorder(), DeviceType.MTP, True)
    assert len(calls) == 1


def test_new_device_notifies_observer():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    assert listener.on_device_notification(payload(make_dev("/m/a"))) is True
    assert obs.events == [("/m/a", True)]


def test_known_device_not_notified_again():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.on_device_notification(payload(make_dev("/m/a")))
    listener.on_device_notification(payload(make_dev("/m/a")))
    assert obs.events == [("/m/a", True)]


def test_removed_device_notifies_unavailable():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.on_device_notification(payload(make_dev("/m/a"), make_dev("/m/b")))
    listener.on_device_notification(payload(make_dev("/m/b")))
    assert obs.events == [("/m/a", True), ("/m/b", True), ("/m/a", False)]


def test_observer_only_sees_its_type():
    listener = PdmListener()
    usb, mtp = Recorder(), Recorder()
    listener.set_device_notifications(usb, DeviceType.USB, True)
    listener.set_device_notifications(mtp, DeviceType.MTP, True)
    listener.on_device_notification(payload(make_dev("/m/a"), make_dev("/m/p", "MTP")))
    assert usb.events == [("/m/a", True)]
    assert mtp.events == [("/m/p", True)]


def test_unsupported_device_ignored():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.on_device_notification(payload(make_dev("/m/x", "OTHER")))
    late = Recorder()
    listener.set_device_notifications(late, DeviceType.UNSUPPORTED, True)
    assert obs.events == []
    assert late.events == []


def test_late_observer_gets_known_devices():
    listener = PdmListener()
    listener.on_device_notification(payload(make_dev("/m/a"), make_dev("/m/b")))
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    assert obs.events == [("/m/a", True), ("/m/b", True)]


def test_duplicate_registration_ignored():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.on_device_notification(payload(make_dev("/m/a")))
    assert obs.events == [("/m/a", True)]


def test_turning_off_stops_notifications():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.set_device_notifications(obs, DeviceType.USB, False)
    listener.on_device_notification(payload(make_dev("/m/a")))
    assert obs.events == []


def test_missing_list_clears_devices_silently():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.on_device_notification(payload(make_dev("/m/a")))
    assert listener.on_device_notification(json.dumps({"returnValue": True})) is True
    late = Recorder()
    listener.set_device_notifications(late, DeviceType.USB, True)
    assert late.events == []
    assert obs.events == [("/m/a", True)]
    listener.on_device_notification(payload(make_dev("/m/a")))
    assert obs.events == [("/m/a", True), ("/m/a", True)]


def test_non_array_list_changes_nothing():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    listener.on_device_notification(payload(make_dev("/m/a")))
    assert listener.on_device_notification(json.dumps({"storageDeviceList": 5})) is True
    assert obs.events == [("/m/a", True)]


@pytest.mark.parametrize("dev", [
    {"deviceType": "USB_STORAGE"},
    {"deviceType": "USB_STORAGE", "storageDriveList": []},
    {"deviceType": "USB_STORAGE", "storageDriveList": [{}]},
    {"deviceType": "USB_STORAGE", "storageDriveList": [{"mountName": ""}]},
])
def test_malformed_devices_skipped(dev):
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.USB, True)
    assert listener.on_device_notification(json.dumps({"storageDeviceList": [dev]})) is True
    assert obs.events == []


def test_mapping_payload_accepted():
    listener = PdmListener()
    obs = Recorder()
    listener.set_device_notifications(obs, DeviceType.MTP, True)
    assert listener.on_device_notification({"storageDeviceList": [make_dev("/m/p", "MTP")]})
    assert obs.events == [("/m/p", True)]