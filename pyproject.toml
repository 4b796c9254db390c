[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "avroschema"
version = "0.1.0"
description = "Avro schema parsing, canonical forms, fingerprints, compatibility checks, binary writing and a schema registry client"
requires-python = ">=3.10"
dependencies = []
keywords = ["avro", "schema", "serialization", "fingerprint", "schema-registry"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["avroschema"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
