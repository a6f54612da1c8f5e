[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stacksynth"
version = "0.1.0"
description = "Logic of a stackable polyphonic keyboard synthesiser: waveforms, knobs, note slots, board-to-board messages and octave handshaking."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "synthesiser",
    "synthesizer",
    "waveform",
    "phase accumulator",
    "vibrato",
    "keyboard",
    "polyphony",
]
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
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stacksynth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
