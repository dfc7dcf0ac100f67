[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flexnet"
version = "0.1.0"
description = "Small asyncio TCP and TLS server toolkit with pluggable listeners, connections and handlers"
requires-python = ">=3.11"
keywords = ["asyncio", "tcp", "tls", "server", "pkcs12", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: System :: Networking",
    "Typing :: Typed",
]
dependencies = [
    "cryptography",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
flexnet = "flexnet.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["flexnet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
