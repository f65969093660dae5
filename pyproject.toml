[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jiraboard"
version = "0.1.0"
description = "Building blocks for a Jira board tracking service: Jira client, wiki markup rendering, file storage, pagination, response envelopes and SQL migrations."
requires-python = ">=3.10"
keywords = ["jira", "agile", "board", "sprint", "storage", "pagination", "migrations"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Typing :: Typed",
]
dependencies = [
    "cryptography",
    "bcrypt",
    "requests",
    "grpcio",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["jiraboard"]

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
