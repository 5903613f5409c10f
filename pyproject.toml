[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pingmonke"
version = "0.1.0"
description = "Scheduled TCP connectivity probes logged to CSV files per period, with event summaries and a live terminal viewer"
requires-python = ">=3.10"
keywords = ["ping", "latency", "network", "monitoring", "uptime", "csv", "tui"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]
dependencies = [
    "pyyaml>=6.0",
    "blessed>=1.20",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
pingmonke = "pingmonke.pingmonke_cli:main"
tailmonke = "pingmonke.tailmonke_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pingmonke"]

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
ignore_missing_imports = true
