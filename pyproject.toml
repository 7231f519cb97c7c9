[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "httpdebugproxy"
version = "0.1.0"
description = "A reverse HTTP proxy that prints every request and response passing through it"
requires-python = ">=3.10"
keywords = ["http", "proxy", "debugging", "reverse-proxy", "logging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: aiohttp",
    "Framework :: AsyncIO",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: Software Development :: Debuggers",
]
dependencies = [
    "aiohttp>=3.9",
    "pyyaml>=6.0",
    "python-dotenv>=1.0",
    "termcolor>=2.3",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
httpdebugproxy = "httpdebugproxy.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["httpdebugproxy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
