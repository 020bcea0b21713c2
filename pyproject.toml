[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spidertrail"
version = "1.1.2"
description = "Endpoint discovery for web crawlers: HTML, header and known-file parsers that turn responses into navigation requests"
requires-python = ">=3.10"
keywords = [
    "crawler",
    "spider",
    "html",
    "robots.txt",
    "sitemap",
    "endpoint-discovery",
    "htmx",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
    "Topic :: Text Processing :: Markup :: HTML",
]
dependencies = [
    "beautifulsoup4>=4.11",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
spidertrail-maze-score = "spidertrail.maze_score:main"

[tool.hatch.build.targets.wheel]
packages = ["spidertrail"]

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
