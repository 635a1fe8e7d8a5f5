"""Tracking of attached storage devices reported by the device manager."""

from __future__ import annotations

import abc
import copy
import enum
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

PDM_URL = "luna://com.webos.service.pdm/getAttachedStorageDeviceList"


class DeviceType(enum.Enum):
    """Kind of an attached storage device."""

    UNSUPPORTED = "unsupported"
    USB = "usb"
    MTP = "mtp"


_TYPE_BY_NAME = {
    "MTP": DeviceType.MTP,
    "USB_STORAGE": DeviceType.USB,
}


class PdmObserver(abc.ABC):
    """Receives updates about storage devices of a registered type."""

    @abc.abstractmethod
    def pdm_update(self, dev: Mapping[str, Any], available: bool) -> None:
        """Called when a device appears (available) or disappears.

        The device is passed as its JSON description, since one device may
        hold several drives and the observer decides what it needs.
        """


class PdmDevice:
    """A storage device as described by the device manager."""

    def __init__(self, mount_name: str, dev: Mapping[str, Any]) -> None:
        self.mount_name = mount_name
        self.dev: dict[str, Any] = copy.deepcopy(dict(dev))
        type_name = self.dev.get("deviceType")
        self.type = _TYPE_BY_NAME.get(type_name, DeviceType.UNSUPPORTED) \
            if isinstance(type_name, str) else DeviceType.UNSUPPORTED
        self.dirty = False

    def mark_dirty(self, flag: bool) -> None:
        """Mark the device as possibly gone; dirty devices are dropped on cleanup."""
        self.dirty = flag

    def __repr__(self) -> str:
        return f"PdmDevice({self.mount_name!r}, type={self.type.name}, dirty={self.dirty})"


class PdmListener:
    """Keeps the list of attached devices and tells observers about changes.

    subscribe is called once, when the first observer registers, to start
    receiving device lists; each list is then fed to on_device_notification.
    """

    def __init__(self, subscribe: Optional[Callable[[], None]] = None) -> None:
        self._subscribe = subscribe
        self._subscribed = False
        self._observers: dict[DeviceType, list[PdmObserver]] = {}
        self._devices: dict[str, PdmDevice] = {}
        self._mounts_by_type: dict[DeviceType, list[str]] = {}

    def set_device_notifications(
        self,
        observer: PdmObserver,
        device_type: DeviceType,
        on: bool,
    ) -> None:
        """Turn notifications about devices of a type on or off for an observer.

        A newly registered observer is told at once about the devices
        already known for that type.
        """
        if on:
            if self._subscribed:
                if observer in self._observers.get(device_type, ()):
                    return
            else:
                self._start_subscription()
            logger.debug("Add observer %r", observer)
            self._observers.setdefault(device_type, []).append(observer)
            for mount_name in list(self._mounts_by_type.get(device_type, ())):
                observer.pdm_update(self._devices[mount_name].dev, True)
            return

        observers = self._observers.get(device_type)
        if observers:
            logger.debug("Remove observer %r", observer)
            self._observers[device_type] = [obs for obs in observers if obs is not observer]

    def _start_subscription(self) -> None:
        self._subscribed = True
        logger.info("Subscribed for %s", PDM_URL)
        if self._subscribe is not None:
            self._subscribe()

    def on_device_notification(self, payload: Union[str, bytes, Mapping[str, Any]]) -> bool:
        """Process a device list from the device manager; False if it is not valid JSON."""
        if isinstance(payload, Mapping):
            tree: Any = payload
        else:
            try:
                tree = json.loads(payload)
            except (ValueError, TypeError):
                logger.error("Invalid JSON message: %r", payload)
                return False
        logger.info("Pdm attached storage device update received: %s", payload)

        if not isinstance(tree, Mapping) or "storageDeviceList" not in tree:
            self._devices.clear()
            self._mounts_by_type.clear()
            return True

        device_list = tree["storageDeviceList"]
        if not isinstance(device_list, list):
            return True

        for device in self._devices.values():
            device.mark_dirty(True)

        for dev in device_list:
            mount_name = self._mount_name(dev)
            if mount_name is not None:
                self._check_device(mount_name, dev)

        self._cleanup_devices()
        return True

    @staticmethod
    def _mount_name(dev: Any) -> Optional[str]:
        if not isinstance(dev, Mapping) or "storageDriveList" not in dev:
            logger.debug("storageDriveList is not valid format")
            return None
        drives = dev["storageDriveList"]
        # The drive list always holds a single drive.
        drive = drives[0] if isinstance(drives, list) and drives else None
        if not isinstance(drive, Mapping) or "mountName" not in drive:
            logger.error("mountName field is missing!")
            return None
        mount_name = drive["mountName"]
        if not isinstance(mount_name, str) or not mount_name:
            logger.error("mountName is NULL!")
            return None
        return mount_name

    def _check_device(self, mount_name: str, dev: Mapping[str, Any]) -> None:
        known = self._devices.get(mount_name)
        if known is not None:
            known.mark_dirty(False)
            return
        device = PdmDevice(mount_name, dev)
        if device.type is DeviceType.UNSUPPORTED:
            return
        self._devices[mount_name] = device
        self._mounts_by_type.setdefault(device.type, []).append(mount_name)
        for observer in list(self._observers.get(device.type, ())):
            observer.pdm_update(device.dev, True)

    def _cleanup_devices(self) -> None:
        gone = [device for device in self._devices.values() if device.dirty]
        for device in gone:
            for observer in list(self._observers.get(device.type, ())):
                observer.pdm_update(device.dev, False)
            mounts = self._mounts_by_type.get(device.type, [])
            self._mounts_by_type[device.type] = [m for m in mounts if m != device.mount_name]
            del self._devices[device.mount_name]