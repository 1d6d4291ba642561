[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fadroma"
version = "0.1.0"
description = "Byte-keyed storage helpers, token transaction history and small example contracts for contract-style state machines"
requires-python = ">=3.10"
dependencies = []
keywords = ["storage", "key-value", "smart-contract", "snip20", "transaction-history"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fadroma"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
