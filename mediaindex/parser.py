"""Scheduling of meta data extraction for media items."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, MutableMapping
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .extractor import MetaDataExtractor
from .imageextractor import ImageExtractor
from .mediaitem import DeviceLike, MediaItem
from .metatypes import ExtractorType, MediaType, MetaValue, media_type_to_string

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 4

EXT_MP3 = "mp3"
EXT_OGG = "ogg"

_EXTRACTOR_CLASSES: dict[ExtractorType, type[MetaDataExtractor]] = {
    ExtractorType.IMAGE: ImageExtractor,
}


def create_extractor(extractor_type: Optional[ExtractorType]) -> Optional[MetaDataExtractor]:
    """Create the extractor for a type, or None if this package has none for it."""
    extractor_class = _EXTRACTOR_CLASSES.get(extractor_type)
    if extractor_class is None:
        logger.error("Invalid extractor type : %s", extractor_type)
        return None
    return extractor_class()


def extractor_type_for(media_type: Optional[MediaType], ext: str) -> Optional[ExtractorType]:
    """The extractor type suited to a media type and file extension."""
    if media_type is MediaType.AUDIO:
        if ext in (EXT_MP3, EXT_OGG):
            return ExtractorType.TAGLIB
        return ExtractorType.GSTREAMER
    if media_type is MediaType.VIDEO:
        return ExtractorType.GSTREAMER
    if media_type is MediaType.IMAGE:
        return ExtractorType.IMAGE
    return None


def _is_local(path: str) -> bool:
    return path.startswith("/")


class MediaParser:
    """Runs meta data extraction for media items on a pool of worker threads.

    Parsed items are handed to on_parsed, called from a worker thread.
    A single item can also be extracted directly with set_media_item and
    extract_extra_meta.
    """

    def __init__(
        self,
        on_parsed: Optional[Callable[[MediaItem], None]] = None,
        workers: int = DEFAULT_WORKERS,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._on_parsed = on_parsed
        self._pool = ThreadPoolExecutor(max_workers=workers,
                                        thread_name_prefix="meta-extract")
        self._item_lock = threading.Lock()
        self._media_item: Optional[MediaItem] = None
        self._extractors: dict[ExtractorType, Optional[MetaDataExtractor]] = {
            extractor_type: create_extractor(extractor_type)
            for extractor_type in ExtractorType
        }

    def enqueue_task(self, media_item: MediaItem) -> None:
        """Queue a media item for extraction on a worker thread."""
        self._pool.submit(self.extract_meta, media_item)

    def extract_meta(self, media_item: MediaItem) -> bool:
        """Extract the basic meta data of an item and hand it on as parsed.

        Returns True if the extraction itself succeeded.
        """
        try:
            logger.debug("Media item to extract %s with parser %s", media_item.uri, self)
            if not _is_local(media_item.path):
                logger.error("No extractor for non-local media item %s", media_item.uri)
                return False

            extractor = self._extractors.get(media_item.extractor_type)
            if extractor is None:
                logger.warning("No extractor of type %s for %s",
                               media_item.extractor_type, media_item.uri)
                succeeded = False
            else:
                succeeded = extractor.extract_meta(media_item)
                if not succeeded:
                    logger.warning("%s meta data extraction failed!", media_item.uri)

            media_item.parsed = True
            if self._on_parsed is not None:
                self._on_parsed(media_item)
            return succeeded
        except Exception:
            logger.exception("MediaParser::extract_meta failure")
            return False

    def set_media_item(self, uri: str, device: Optional[DeviceLike]) -> bool:
        """Select the item at uri for direct extraction; False if it cannot be used."""
        with self._item_lock:
            self._media_item = None
            try:
                self._media_item = MediaItem.from_uri(uri, device)
            except (ValueError, OSError) as exc:
                logger.error("Failed to get mediaitem for %s: %s", uri, exc)
                return False
        return True

    def extract_extra_meta(self, props: MutableMapping[str, MetaValue]) -> bool:
        """Extract extra meta data of the selected item into props, then forget the item."""
        with self._item_lock:
            item = self._media_item
            if item is None:
                logger.error("Media Item is invalid")
                return False
            try:
                if not _is_local(item.path):
                    logger.error("No extractor for non-local media item %s", item.uri)
                    return False
                extractor_type = extractor_type_for(item.media_type, item.ext)
                extractor = self._extractors.get(extractor_type)
                if extractor is None:
                    logger.warning("Could not found valid extractor, type : %s, ext : %s",
                                   media_type_to_string(item.media_type), item.ext)
                    extractor = create_extractor(extractor_type)
                    if extractor is None:
                        return False
                    self._extractors[extractor_type] = extractor
                extractor.extract_meta(item, True)
                item.parsed = True
                item.put_extra_meta_to_json(props)
                self._media_item = None
            except Exception:
                logger.exception("MediaParser::extract_extra_meta failure")
                return False
        return True

    def close(self) -> None:
        """Wait for queued tasks to finish and stop the workers."""
        self._pool.shutdown(wait=True)

    def __enter__(self) -> MediaParser:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()