"""A single media file or stream known to the indexer, with its meta data."""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import MutableMapping
from typing import Optional, Protocol

from .metatypes import (
    ExtractorType,
    MediaType,
    Meta,
    MetaValue,
    is_audio_meta,
    is_image_meta,
    is_video_meta,
    media_item_supported,
    put_properties,
    type_from_mime,
)

logger = logging.getLogger(__name__)

THUMBNAIL_EXTENSION = ".jpg"
THUMBNAIL_FILE_NAME_LENGTH = 15


class DeviceLike(Protocol):
    """What a media item needs from the device it belongs to."""

    @property
    def uri(self) -> str:
        """Base uri of the device."""
        ...

    @property
    def uuid(self) -> str:
        """Unique id of the device."""
        ...

    def increment_media_item_count(self, media_type: MediaType) -> None:
        """Count one more item of the given type on the device."""
        ...


def _extension(path: str) -> str:
    return path[path.rfind(".") + 1:]


def _join_uri(base: str, path: str) -> str:
    if base and not base.endswith("/") and path and not path.startswith("/"):
        return f"{base}/{path}"
    return base + path


class MediaItem:
    """A media item on a device, holding its type, location and meta data."""

    def __init__(
        self,
        device: DeviceLike,
        path: str,
        mime: str,
        hash: int,
        filesize: int,
        ext: str,
        media_type: Optional[MediaType],
        extractor_type: Optional[ExtractorType],
    ) -> None:
        self._setup(device, path, mime, hash, filesize, ext, media_type, extractor_type)
        if self.media_type is not None:
            device.increment_media_item_count(self.media_type)

    def _setup(
        self,
        device: Optional[DeviceLike],
        path: str,
        mime: str,
        hash: int,
        filesize: int,
        ext: str,
        media_type: Optional[MediaType],
        extractor_type: Optional[ExtractorType],
    ) -> None:
        self.device = device
        self.path = path
        self.mime = mime
        self.hash = hash
        self.filesize = filesize
        self.ext = ext
        self.media_type = media_type
        self.extractor_type = extractor_type
        self.parsed = False
        self.uri = _join_uri(device.uri, path) if device is not None else ""
        self._meta: dict[Meta, MetaValue] = {}
        self.thumbnail_file_name = self.generate_rand_filename() + THUMBNAIL_EXTENSION
        logger.debug("path : %s, mime : %s, uri : %s", path, mime, self.uri)

    @classmethod
    def from_mime(
        cls,
        device: DeviceLike,
        path: str,
        mime: str,
        hash: int,
        filesize: int = 0,
    ) -> MediaItem:
        """Create an item whose type is taken from its MIME type."""
        return cls(device, path, mime, hash, filesize, _extension(path),
                   type_from_mime(mime), None)

    @classmethod
    def from_type(
        cls,
        device: DeviceLike,
        path: str,
        hash: int,
        media_type: Optional[MediaType],
    ) -> MediaItem:
        """Create an item of a known type; the device count is left alone."""
        item = cls.__new__(cls)
        item._setup(device, path, "", hash, 0, _extension(path), media_type, None)
        return item

    @classmethod
    def from_uri(cls, uri: str, device: Optional[DeviceLike]) -> MediaItem:
        """Create an item for direct extraction from the uri of a local file.

        Raises ValueError if the uri does not belong to the device or the file
        is not a supported media file, and OSError if the file cannot be read.
        """
        if device is None:
            raise ValueError(f"no device for uri {uri!r}")
        index = uri.find(device.uri)
        if index < 0:
            raise ValueError(f"uri {uri!r} does not belong to device {device.uri!r}")
        path = uri[index + len(device.uri):]
        stat = os.stat(path)
        mime = media_item_supported(path)
        if mime is None:
            raise ValueError(f"media item {path!r} is not supported by this system")

        item = cls.__new__(cls)
        item._setup(device, path, mime, stat.st_mtime_ns, stat.st_size,
                    _extension(path), type_from_mime(mime), None)
        item.uri = uri
        return item

    @property
    def uuid(self) -> str:
        """Unique id of the device this item belongs to."""
        if self.device is None:
            raise ValueError("media item has no device")
        return self.device.uuid

    def meta(self, meta: Meta) -> Optional[MetaValue]:
        """The value stored for a meta key, or None."""
        return self._meta.get(meta)

    def set_meta(self, meta: Meta, value: MetaValue) -> None:
        """Store a meta value; an artist also becomes album artist if none is set."""
        logger.debug("Setting '%s' on '%s' to '%s'", meta.name, self.uri, value)
        if meta is Meta.ARTIST and self.meta(Meta.ALBUM_ARTIST) is None:
            self._meta[Meta.ALBUM_ARTIST] = value
        self._meta[meta] = value

    def _wants_extra(self, meta: Meta) -> bool:
        if self.media_type is MediaType.AUDIO:
            return is_audio_meta(meta)
        if self.media_type is MediaType.VIDEO:
            return is_video_meta(meta) or is_audio_meta(meta)
        if self.media_type is MediaType.IMAGE:
            return is_image_meta(meta)
        return False

    def put_extra_meta_to_json(self, props: MutableMapping[str, MetaValue]) -> None:
        """Write the extra meta data that suits this item's type into props."""
        for meta in Meta:
            if meta < Meta.TRACK or not self._wants_extra(meta):
                continue
            put_properties(meta.name.lower() and _meta_name(meta), self.meta(meta), props)

    def generate_rand_filename(self) -> str:
        """A random name of digits for a thumbnail file."""
        return str(secrets.randbits(64))[:THUMBNAIL_FILE_NAME_LENGTH]


def _meta_name(meta: Meta) -> str:
    from .metatypes import meta_to_string

    return meta_to_string(meta)