[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scadvisor"
version = "0.1.0"
description = "Data model, configuration, validation and in-memory helpers for a Kubernetes cluster scaling advisor"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "kubernetes",
    "autoscaling",
    "scaling-advice",
    "cluster",
    "label-selector",
    "configuration",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["scadvisor"]

[tool.hatch.build.targets.sdist]
include = [
    "scadvisor",
    "tests",
    "README.md",
    "pyproject.toml",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
