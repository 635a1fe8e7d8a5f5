# mediaindex

Building blocks for a media indexer: a model of media items and their
metadata, an image metadata extractor, a parser that runs extraction on a
pool of worker threads, and a listener that keeps track of attached storage
devices.

## Modules

- `mediaindex.metatypes` — the enumerations `MediaType`, `Meta`,
  `CommonType`, `ExtractorType`, `AudioMeta` and `VideoMeta`, their
  property names (`media_type_to_string`, `meta_to_string`,
  `common_to_string`), and the checks that decide whether a file is
  indexed:
  - `type_from_mime(mime)` gives the `MediaType` whose name (`audio`,
    `video`, `image`) starts the MIME type, or `None`;
  - `mime_type_supported(mime)` is true when `type_from_mime` finds a type;
  - `ext_type_supported(ext)` rejects an empty extension and `rv`, `ra`,
    `rm`, `asf`;
  - `media_item_supported(path)` guesses the MIME type from the file name
    (falling back to `video/MP2T`, `video/MP2P` or `video/x-asf` for `.ts`,
    `.ps` and `.asf`) and returns it, or `None` if the file is skipped;
  - `is_media_meta`, `is_audio_meta`, `is_video_meta`, `is_image_meta` say
    which keys belong to which kind of item;
  - `put_properties(meta_str, data, props)` stores a value in a dict, or an
    empty string when the value is `None`.
- `mediaindex.mediaitem` — `MediaItem`, one file or stream on a device,
  with `uri`, `path`, `ext`, `mime`, `hash`, `filesize`, `media_type`,
  `extractor_type`, `parsed` and a random `thumbnail_file_name`. Build one
  with `MediaItem.from_mime`, `MediaItem.from_type` or `MediaItem.from_uri`
  (the last stats a local file and raises `ValueError` or `OSError` when it
  cannot be used). Read and write metadata with `meta(key)` and
  `set_meta(key, value)`; setting an artist also sets the album artist if
  none is set yet. `put_extra_meta_to_json(props)` writes the extra keys
  (from `Meta.TRACK` on) that suit the item's type into a dict. Any object
  matching the `DeviceLike` protocol (`uri`, `uuid`,
  `increment_media_item_count`) can be the device.
- `mediaindex.extractor` — `MetaDataExtractor`, the abstract base of all
  extractors, with `base_filename`, `extension`, `rand_filename`,
  `last_modified_date` and `set_meta_common` (last-modified date and file
  size).
- `mediaindex.imageextractor` — `ImageExtractor`, built on Pillow. Basic
  extraction sets title, last-modified date, file size, width and height;
  extra extraction reads EXIF date and GPS longitude/latitude (country and
  city are stored as empty strings). Images without EXIF data get no extra
  keys.
- `mediaindex.parser` — `MediaParser`, a thread pool that extracts metadata
  for queued items (`enqueue_task`) and hands each parsed item to an
  `on_parsed` callback; `set_media_item` and `extract_extra_meta` extract a
  single item directly into a dict. `extractor_type_for(media_type, ext)`
  picks the extractor type and `create_extractor(extractor_type)` builds it.
  It is a context manager; `close()` waits for queued work.
- `mediaindex.pdm` — `PdmListener`, `PdmDevice`, `DeviceType` and the
  `PdmObserver` interface. Feed `on_device_notification` the device manager's
  `storageDeviceList` payload (JSON text or a dict); observers registered
  with `set_device_notifications` get `pdm_update(dev, True)` for new
  devices of their type (USB storage or MTP) and `pdm_update(dev, False)`
  for devices that are gone.
- `mediaindex.perf` — `PerfChecker` and `PerfTimeWatch`, named stopwatches
  returning elapsed milliseconds.

## Example

```python
from mediaindex.mediaitem import MediaItem
from mediaindex.metatypes import ExtractorType, Meta, MediaType
from mediaindex.parser import MediaParser


class Disk:
    uri = "file://"
    uuid = "disk-0"

    def increment_media_item_count(self, media_type: MediaType) -> None:
        pass


def store(item: MediaItem) -> None:
    print(item.path, item.meta(Meta.WIDTH), item.meta(Meta.HEIGHT))


item = MediaItem.from_mime(Disk(), "/photos/cat.png", "image/png", hash=0)
item.extractor_type = ExtractorType.IMAGE

with MediaParser(on_parsed=store, workers=2) as parser:
    parser.enqueue_task(item)
```

Tracking storage devices:

```python
from mediaindex.pdm import DeviceType, PdmListener, PdmObserver


class Printer(PdmObserver):
    def pdm_update(self, dev, available):
        print(dev["deviceType"], available)


listener = PdmListener()
listener.set_device_notifications(Printer(), DeviceType.USB, True)
listener.on_device_notification(
    '{"storageDeviceList": [{"deviceType": "USB_STORAGE",'
    ' "storageDriveList": [{"mountName": "/tmp/usb/sda1"}]}]}'
)
```

## What it does not do

- Only images have an extractor. Audio and video items map to the
  `TAGLIB` and `GSTREAMER` extractor types, for which `create_extractor`
  returns `None`, so their extraction reports failure.
- Only local items (paths starting with `/`) are extracted; there is no
  support for remote devices.
- No thumbnails are written; items only carry a generated file name.
- Parsed items are not stored anywhere: the `on_parsed` callback decides
  what happens to them.
- `PdmListener` does not talk to any service itself; pass a `subscribe`
  callable and deliver notifications to `on_device_notification`.
- There is no command-line program.

## Requirements

Python 3.10 or later and Pillow.