"""Common behaviour of all meta data extractors."""

from __future__ import annotations

import abc
import logging
import os
import secrets
import time

from .mediaitem import MediaItem
from .metatypes import Meta

logger = logging.getLogger(__name__)

RAND_FILE_NAME_LENGTH = 15


class MetaDataExtractor(abc.ABC):
    """Base class of extractors that fill a media item with meta data.

    One extractor serves many media items from several threads, so
    implementations must not keep per-item state on the instance.
    """

    @abc.abstractmethod
    def extract_meta(self, media_item: MediaItem, extra: bool = False) -> bool:
        """Extract meta data into the media item; True on success."""

    def base_filename(
        self,
        media_item: MediaItem,
        no_ext: bool = False,
        delimiter: str = "/",
    ) -> str:
        """File name of the item's path, optionally without its extension.

        Every character of delimiter counts as a path separator.
        """
        path = media_item.path
        if not path:
            return ""
        cut = max(path.rfind(char) for char in set(delimiter)) if delimiter else -1
        name = path[cut + 1:]
        if no_ext:
            dot = name.rfind(".")
            if dot >= 0:
                name = name[:dot]
        return name

    def rand_filename(self) -> str:
        """A random name of digits for an attached image."""
        return str(secrets.randbits(64))[:RAND_FILE_NAME_LENGTH]

    def extension(self, media_item: MediaItem) -> str:
        """Extension of the item's path, without the dot."""
        path = media_item.path
        if not path:
            return ""
        return path[path.rfind(".") + 1:]

    def last_modified_date(self, media_item: MediaItem, local_time: bool = False) -> str:
        """Formatted modification time of the item's file, empty if unknown."""
        path = media_item.path
        if not path:
            logger.error("Invalid media item path")
            return ""
        try:
            mtime = os.stat(path).st_mtime
        except OSError as exc:
            logger.error("stat error, caused by : %s", exc.strerror)
            return ""
        moment = time.localtime(mtime) if local_time else time.gmtime(mtime)
        formatted = time.strftime("%c %Z", moment)
        logger.debug("Return time with formatted value %s", formatted)
        return formatted

    def set_meta_common(self, media_item: MediaItem) -> None:
        """Store the modification date and file size of the item."""
        media_item.set_meta(Meta.LAST_MODIFIED_DATE, self.last_modified_date(media_item))
        media_item.set_meta(Meta.FILE_SIZE, int(media_item.filesize))