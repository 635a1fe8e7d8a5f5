"""Media items, image metadata extraction and storage-device tracking for a media indexer."""

__version__ = "0.1.0"