import os

import pytest

from mediaindex.extractor import MetaDataExtractor
from mediaindex.mediaitem import MediaItem
from mediaindex.metatypes import ExtractorType, MediaType, Meta


class FakeDevice:
    uri = "file://"
    uuid = "device-uuid"

    def __init__(self):
        self.counts = {}

    def increment_media_item_count(self, media_type):
        self.counts[media_type] = self.counts.get(media_type, 0) + 1


class PlainExtractor(MetaDataExtractor):
    def extract_meta(self, media_item, extra=False):
        self.set_meta_common(media_item)
        return True


def make_item(path, filesize=0):
    return MediaItem(FakeDevice(), path, "audio/mpeg", 0, filesize,
                     path[path.rfind(".") + 1:], MediaType.AUDIO, ExtractorType.TAGLIB)


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        MetaDataExtractor()


def test_base_filename_keeps_extension_by_default():
    assert PlainExtractor().base_filename(make_item("/music/album/song.mp3")) == "song.mp3"


def test_base_filename_without_extension():
    assert PlainExtractor().base_filename(make_item("/music/album/song.mp3"), True) == "song"


def test_base_filename_without_separator_returns_whole_path():
    assert PlainExtractor().base_filename(make_item("song.mp3")) == "song.mp3"


def test_base_filename_of_empty_path():
    assert PlainExtractor().base_filename(make_item("")) == ""


def test_extension():
    extractor = PlainExtractor()
    assert extractor.extension(make_item("/a/b.c/track.ogg")) == "ogg"
    assert extractor.extension(make_item("")) == ""


def test_rand_filename_is_short_digits():
    extractor = PlainExtractor()
    names = {MetaDataExtractor.rand_filename(extractor) for _ in range(20)}
    assert all(name.isdigit() and 0 < len(name) <= 15 for name in names)
    assert len(names) > 1


def test_last_modified_date_of_missing_file_is_empty(tmp_path):
    item = make_item(str(tmp_path / "missing.mp3"))
    assert PlainExtractor().last_modified_date(item) == ""


def test_last_modified_date_of_empty_path_is_empty():
    assert PlainExtractor().last_modified_date(make_item("")) == ""


def test_last_modified_date_uses_file_mtime(tmp_path):
    path = tmp_path / "song.mp3"
    path.write_bytes(b"data")
    os.utime(path, (0, 0))
    formatted = PlainExtractor().last_modified_date(make_item(str(path)))
    assert "1970" in formatted


def test_set_meta_common(tmp_path):
    path = tmp_path / "song.mp3"
    path.write_bytes(b"abcd")
    item = make_item(str(path), filesize=4)
    assert PlainExtractor().extract_meta(item) is True
    assert item.meta(Meta.FILE_SIZE) == 4
    assert item.meta(Meta.LAST_MODIFIED_DATE) == PlainExtractor().last_modified_date(item)
    assert item.meta(Meta.LAST_MODIFIED_DATE) != ""