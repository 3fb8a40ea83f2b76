[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mediadevices"
version = "0.1.0"
description = "Audio sample containers, raw PCM decoders, channel mixing, RTP samplers and media track helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "pcm", "wave", "rtp", "rtcp", "media", "mixer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mediadevices"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
