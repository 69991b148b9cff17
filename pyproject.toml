[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "adminkit"
version = "2.1.2"
description = "Building blocks for an admin backend: request DTOs, middleware helpers, data-scope permissions, code-generation metadata and server monitoring"
requires-python = ">=3.10"
keywords = ["admin", "backend", "rbac", "middleware", "code-generation", "monitoring"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["adminkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
