"""Media types, meta data keys and the rules that decide which files are indexed."""

from __future__ import annotations

import enum
import logging
import mimetypes
from collections.abc import MutableMapping
from typing import Optional, Union

logger = logging.getLogger(__name__)

MetaValue = Union[int, float, str]

_NOT_SUPPORTED_EXT = frozenset({"rv", "ra", "rm", "asf"})

# Only the built-in tables, so guesses do not depend on the host's mime.types.
_MIME_DB = mimetypes.MimeTypes()

_FALLBACK_MIME_BY_EXT = {
    "ts": "video/MP2T",
    "ps": "video/MP2P",
    "asf": "video/x-asf",
}


class MediaType(enum.IntEnum):
    """Kind of a media item."""

    AUDIO = 0
    VIDEO = 1
    IMAGE = 2


class CommonType(enum.IntEnum):
    """Common fields stored for every media item."""

    URI = 0
    DIRTY = 1
    HASH = 2
    TYPE = 3
    MIME = 4
    FILEPATH = 5
    KIND = 6


class Meta(enum.IntEnum):
    """Meta data keys, in their canonical order."""

    TITLE = 0
    GENRE = 1
    ALBUM = 2
    ARTIST = 3
    DURATION = 4
    THUMBNAIL = 5
    LAST_MODIFIED_DATE = 6
    LAST_MODIFIED_DATE_RAW = 7
    FILE_SIZE = 8
    WIDTH = 9
    HEIGHT = 10
    TRACK = 11
    ALBUM_ARTIST = 12
    TOTAL_TRACKS = 13
    DATE_OF_CREATION = 14
    YEAR = 15
    GEO_LOC_LONGITUDE = 16
    GEO_LOC_LATITUDE = 17
    GEO_LOC_COUNTRY = 18
    GEO_LOC_CITY = 19
    VIDEO_CODEC = 20
    AUDIO_CODEC = 21
    SAMPLE_RATE = 22
    CHANNELS = 23
    BIT_RATE = 24
    BIT_PER_SAMPLE = 25
    LYRIC = 26
    FRAME_RATE = 27


class AudioMeta(enum.IntEnum):
    """Audio stream meta data keys."""

    SAMPLE_RATE = 0
    CHANNELS = 1
    BITRATE = 2
    BIT_PER_SAMPLE = 3


class VideoMeta(enum.IntEnum):
    """Video stream meta data keys."""

    WIDTH = 0
    HEIGHT = 1
    FRAME_RATE = 2


class ExtractorType(enum.IntEnum):
    """Back end used to extract meta data."""

    TAGLIB = 0
    GSTREAMER = 1
    IMAGE = 2


_MEDIA_TYPE_NAMES = {
    MediaType.AUDIO: "audio",
    MediaType.VIDEO: "video",
    MediaType.IMAGE: "image",
}

_META_NAMES = {
    Meta.TITLE: "title",
    Meta.GENRE: "genre",
    Meta.ALBUM: "album",
    Meta.ARTIST: "artist",
    Meta.ALBUM_ARTIST: "album_artist",
    Meta.TRACK: "track",
    Meta.TOTAL_TRACKS: "total_tracks",
    Meta.DATE_OF_CREATION: "date_of_creation",
    Meta.DURATION: "duration",
    Meta.YEAR: "year",
    Meta.THUMBNAIL: "thumbnail",
    Meta.GEO_LOC_LONGITUDE: "geo_location_longitude",
    Meta.GEO_LOC_LATITUDE: "geo_location_latitude",
    Meta.GEO_LOC_COUNTRY: "geo_location_country",
    Meta.GEO_LOC_CITY: "geo_location_city",
    Meta.LAST_MODIFIED_DATE: "last_modified_date",
    Meta.FILE_SIZE: "file_size",
    Meta.SAMPLE_RATE: "sample_rate",
    Meta.CHANNELS: "channels",
    Meta.BIT_RATE: "bit_rate",
    Meta.BIT_PER_SAMPLE: "bit_per_sample",
    Meta.VIDEO_CODEC: "video_codec",
    Meta.AUDIO_CODEC: "audio_codec",
    Meta.LYRIC: "lyric",
    Meta.WIDTH: "width",
    Meta.HEIGHT: "height",
    Meta.FRAME_RATE: "frame_rate",
}

_COMMON_NAMES = {
    CommonType.URI: "uri",
    CommonType.DIRTY: "dirty",
    CommonType.HASH: "hash",
    CommonType.TYPE: "type",
    CommonType.MIME: "mime",
    CommonType.FILEPATH: "file_path",
    CommonType.KIND: "_kind",
}

_MEDIA_META = frozenset({Meta.FILE_SIZE, Meta.DATE_OF_CREATION, Meta.LAST_MODIFIED_DATE})

_AUDIO_META = frozenset({
    Meta.TITLE, Meta.GENRE, Meta.ALBUM, Meta.ARTIST, Meta.DURATION,
    Meta.THUMBNAIL, Meta.FILE_SIZE, Meta.LAST_MODIFIED_DATE, Meta.ALBUM_ARTIST,
    Meta.TRACK, Meta.TOTAL_TRACKS, Meta.SAMPLE_RATE, Meta.BIT_PER_SAMPLE,
    Meta.CHANNELS, Meta.BIT_RATE, Meta.AUDIO_CODEC, Meta.LYRIC,
    Meta.DATE_OF_CREATION,
})

_VIDEO_META = frozenset({
    Meta.TITLE, Meta.DURATION, Meta.WIDTH, Meta.HEIGHT, Meta.VIDEO_CODEC,
    Meta.AUDIO_CODEC, Meta.THUMBNAIL, Meta.FRAME_RATE, Meta.FILE_SIZE,
    Meta.DATE_OF_CREATION, Meta.LAST_MODIFIED_DATE,
})

_IMAGE_META = frozenset({
    Meta.TITLE, Meta.WIDTH, Meta.HEIGHT, Meta.GEO_LOC_LONGITUDE,
    Meta.GEO_LOC_LATITUDE, Meta.GEO_LOC_COUNTRY, Meta.GEO_LOC_CITY,
    Meta.FILE_SIZE, Meta.DATE_OF_CREATION, Meta.LAST_MODIFIED_DATE,
})


def media_type_to_string(media_type: Optional[MediaType]) -> str:
    """Name of a media type, empty for an unknown one."""
    return _MEDIA_TYPE_NAMES.get(media_type, "")


def meta_to_string(meta: Meta) -> str:
    """Property name of a meta data key, empty if it has none."""
    return _META_NAMES.get(meta, "")


def common_to_string(common: CommonType) -> str:
    """Property name of a common field."""
    return _COMMON_NAMES.get(common, "")


def type_from_mime(mime: str) -> Optional[MediaType]:
    """Media type a MIME type belongs to, or None if not supported."""
    for media_type, prefix in _MEDIA_TYPE_NAMES.items():
        if mime.startswith(prefix):
            return media_type
    logger.debug("MIME type '%s' not supported", mime)
    return None


def mime_type_supported(mime: str) -> bool:
    """Whether files of this MIME type are indexed."""
    return type_from_mime(mime) is not None


def ext_type_supported(ext: str) -> bool:
    """Whether files with this extension are indexed."""
    if not ext:
        logger.error("Input fpath is invalid")
        return False
    if ext in _NOT_SUPPORTED_EXT:
        logger.debug("ext %s is not supported extension", ext)
        return False
    return True


def _extension(path: str) -> str:
    return path[path.rfind(".") + 1:]


def media_item_supported(path: str) -> Optional[str]:
    """Return the MIME type of a supported media file, or None if it is skipped."""
    guessed, _ = _MIME_DB.guess_type(path, strict=False)
    uncertain = guessed is None
    mime = guessed or "application/octet-stream"

    ext = _extension(path)
    if not ext_type_supported(ext):
        logger.debug("skip file scanning for %s", path)
        return None

    supported = mime_type_supported(mime)
    if not supported:
        fallback = _FALLBACK_MIME_BY_EXT.get(ext)
        if fallback is None:
            logger.info("it's NOT ts/ps/asf. need to check for '%s'", path)
            return None
        mime = fallback
        supported = mime_type_supported(mime)

    if uncertain and not supported:
        logger.info("Invalid MIME type for '%s'", path)
        return None
    return mime


def is_media_meta(meta: Meta) -> bool:
    """Whether the key is file level meta data."""
    return meta in _MEDIA_META


def is_audio_meta(meta: Meta) -> bool:
    """Whether the key applies to audio items."""
    return meta in _AUDIO_META


def is_video_meta(meta: Meta) -> bool:
    """Whether the key applies to video items."""
    return meta in _VIDEO_META


def is_image_meta(meta: Meta) -> bool:
    """Whether the key applies to image items."""
    return meta in _IMAGE_META


def put_properties(
    meta_str: str,
    data: Optional[MetaValue],
    props: MutableMapping[str, MetaValue],
) -> None:
    """Store a meta value under its name; a missing value becomes an empty string."""
    if data is None:
        logger.warning("data doesn't have value for meta type %s", meta_str)
        props[meta_str] = ""
        return
    logger.debug("Setting '%s' to '%s'", meta_str, data)
    props[meta_str] = data