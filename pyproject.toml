[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mqttwire"
version = "0.2.0"
description = "Encoder and decoder for MQTT v5.0 PUBLISH and acknowledgement packet bodies."
requires-python = ">=3.10"
keywords = ["mqtt", "mqtt5", "codec", "protocol", "network"]
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
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mqttwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
