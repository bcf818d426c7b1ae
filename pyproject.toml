[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lora_igate"
version = "0.1.0"
description = "Building blocks for a LoRa APRS iGate: SX127x radio driver, APRS framing, APRS-IS client, NTP time, OLED bitmap rendering and a cooperative task scheduler."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "lora",
    "aprs",
    "aprs-is",
    "igate",
    "ham radio",
    "sx1276",
    "ssd1306",
    "oled",
    "ntp",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lora_igate"]

[tool.hatch.build.targets.sdist]
include = ["lora_igate", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
