[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tokenvm"
version = "0.1.0"
description = "Genesis rules, order book tracking, action metrics and a JSON-RPC server and client for a token virtual machine"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["blockchain", "token", "orderbook", "json-rpc", "genesis"]
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
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tokenvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
