"""Meta data extraction for still images."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from PIL import Image

from .extractor import MetaDataExtractor
from .mediaitem import MediaItem
from .metatypes import MediaType, Meta, media_type_to_string

logger = logging.getLogger(__name__)

_GPS_IFD = 0x8825
_TAG_DATE_TIME = 0x0132
_TAG_GPS_LATITUDE_REF = 1
_TAG_GPS_LATITUDE = 2
_TAG_GPS_LONGITUDE_REF = 3
_TAG_GPS_LONGITUDE = 4

# Extensions with a dedicated resolution reader and the format they must hold.
_RESOLUTION_FORMATS = {
    "jpg": "JPEG",
    "bmp": "BMP",
    "png": "PNG",
    "gif": "GIF",
}

# Meta key -> (IFD, None for the main one; tags whose values are joined).
_EXIF_MAP: dict[Meta, tuple[Optional[int], tuple[int, ...]]] = {
    Meta.DATE_OF_CREATION: (None, (_TAG_DATE_TIME,)),
    Meta.GEO_LOC_LONGITUDE: (_GPS_IFD, (_TAG_GPS_LONGITUDE_REF, _TAG_GPS_LONGITUDE)),
    Meta.GEO_LOC_LATITUDE: (_GPS_IFD, (_TAG_GPS_LATITUDE_REF, _TAG_GPS_LATITUDE)),
}

_EXTRA_FLAGS = (
    Meta.DATE_OF_CREATION,
    Meta.GEO_LOC_LONGITUDE,
    Meta.GEO_LOC_LATITUDE,
    Meta.GEO_LOC_COUNTRY,
    Meta.GEO_LOC_CITY,
)


def _format_scalar(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1").rstrip("\x00")
    if isinstance(value, str):
        return value.rstrip("\x00")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(value, "g")
    numerator = getattr(value, "numerator", None)
    denominator = getattr(value, "denominator", None)
    if numerator is None or denominator is None:
        return str(value)
    if not denominator:
        return f"{numerator}/{denominator}"
    decimals = max(int(math.log10(denominator) - 0.08 + 1.0), 0)
    return f"{numerator / denominator:2.{decimals}f}"


def _format_exif_value(value: Any) -> str:
    if isinstance(value, (tuple, list)):
        return ", ".join(_format_scalar(item) for item in value)
    return _format_scalar(value)


def _read_exif(path: str) -> Optional[Image.Exif]:
    try:
        with Image.open(path) as image:
            exif = image.getexif()
    except OSError as exc:
        logger.debug("No exif data in %s: %s", path, exc)
        return None
    return exif if len(exif) else None


class ImageExtractor(MetaDataExtractor):
    """Reads resolution and EXIF meta data of image files."""

    def extract_meta(self, media_item: MediaItem, extra: bool = False) -> bool:
        """Fill an image item with basic or, if extra, EXIF meta data."""
        if media_item.media_type is not MediaType.IMAGE:
            logger.error("mediaitem type is not image")
            return False
        logger.debug("Extract meta data from '%s' (%s)", media_item.path,
                     media_type_to_string(media_item.media_type))
        self.set_meta_common(media_item)
        media_item.set_meta(Meta.TITLE, self.base_filename(media_item, True))
        if extra:
            self._set_extra_meta(media_item)
        else:
            self._set_resolution(media_item)
        return True

    def _set_resolution(self, media_item: MediaItem) -> bool:
        expected = _RESOLUTION_FORMATS.get(media_item.ext)
        try:
            with Image.open(media_item.path) as image:
                if expected is not None and image.format != expected:
                    logger.error("%s is not a %s file", media_item.path, expected)
                    return False
                width, height = image.size
        except OSError as exc:
            logger.error("Failed to read image %s: %s", media_item.path, exc)
            return False
        logger.debug("set width/height for %s, (%d, %d)", media_item.path, width, height)
        media_item.set_meta(Meta.WIDTH, width)
        media_item.set_meta(Meta.HEIGHT, height)
        return True

    def _set_extra_meta(self, media_item: MediaItem) -> None:
        exif = _read_exif(media_item.path)
        if exif is None:
            # Without EXIF there are no tags to report for an image.
            logger.debug("No exif data for %s", media_item.path)
            return
        for flag in _EXTRA_FLAGS:
            media_item.set_meta(flag, self._exif_value(exif, flag))

    @staticmethod
    def _exif_value(exif: Image.Exif, flag: Meta) -> str:
        mapping = _EXIF_MAP.get(flag)
        if mapping is None:
            return ""
        ifd_id, tags = mapping
        ifd = exif if ifd_id is None else exif.get_ifd(ifd_id)
        parts = (_format_exif_value(ifd[tag]) for tag in tags if tag in ifd)
        return " ".join(part for part in parts if part)