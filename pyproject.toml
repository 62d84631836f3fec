[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "antisandwich"
version = "0.1.0"
description = "Build and evaluate slot-window guards that abort or tighten swap slippage when a flagged leader produces the block"
requires-python = ">=3.10"
dependencies = []
keywords = ["solana", "mev", "sandwich", "slippage", "validator", "leader-schedule"]
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
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["antisandwich"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
