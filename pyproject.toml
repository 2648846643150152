[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hedhuntr"
version = "0.1.0"
description = "Job-hunting pipeline building blocks: event envelopes, job sources, description parsing, candidate matching, profile quality checks, resume drafting and webhook notifications."
requires-python = ">=3.10"
dependencies = []
keywords = ["jobs", "job-search", "resume", "matching", "notifications", "events", "greenhouse"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hedhuntr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
