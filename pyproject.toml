[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qpack-tables"
version = "0.1.0"
description = "QPACK dynamic table bookkeeping, header fields and prefix integer coding for HTTP/3"
requires-python = ">=3.10"
dependencies = []
keywords = ["qpack", "http3", "header-compression", "dynamic-table", "prefix-integer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qpack_tables"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
