[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cosmoshelper"
version = "0.1.0"
description = "Helpers for Azure Cosmos DB: idempotent setup, typed item operations, query metrics, emulator tokens and Functions trigger parsing"
requires-python = ">=3.10"
dependencies = []
keywords = ["cosmosdb", "azure", "database", "query-metrics", "azure-functions"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cosmoshelper"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
