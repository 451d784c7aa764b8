[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "edgeproto"
version = "0.6.0"
description = "Encoding and decoding of IPv4/UDP packets and WebSocket frames, with UDP over raw sockets"
requires-python = ">=3.10"
dependencies = []
keywords = ["ipv4", "udp", "websocket", "raw-socket", "checksum", "network"]
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
    "Framework :: AsyncIO",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["edgeproto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
