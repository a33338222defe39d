[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slinkykit"
version = "0.4.0"
description = "Building blocks for cluster operators: pod state checks, annotation readers, keyed stores, slow-start batching, controller revision history and pod control over an in-memory object store."
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "operator", "controller", "pods", "clustering", "revisions"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["slinkykit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
