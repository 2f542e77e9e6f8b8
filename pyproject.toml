[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "primkit"
version = "0.1.0"
description = "Merkle trees, a BLAKE2s PRF and field-element input packing for proof systems"
requires-python = ">=3.10"
dependencies = []
keywords = ["merkle-tree", "blake2s", "prf", "snark", "cryptography"]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["primkit"]

[tool.pytest.ini_options]
addopts = "-ra"
