[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mediaindex"
version = "0.1.0"
description = "Media item model, image metadata extraction and storage-device tracking for a media indexer"
requires-python = ">=3.10"
keywords = ["media", "indexer", "metadata", "exif", "image", "mime", "storage"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mediaindex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
