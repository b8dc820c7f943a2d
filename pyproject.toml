[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wimtools"
version = "0.1.0"
description = "Pure-Python pieces for network-booting Windows images: boot command line parsing, CPIO extraction, LZNT1/LZX decompression, PE layout, SHA-1 and printf-style formatting"
requires-python = ">=3.10"
dependencies = []
keywords = ["wim", "boot", "cpio", "lznt1", "lzx", "huffman", "pe", "sha1", "efi", "device-path"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Boot",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["wimtools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
