[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "difysdk"
version = "0.1.0"
description = "Client for the Dify application API: chat messages, conversations, feedback, parameters and workflows"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["dify", "llm", "chat", "workflow", "api", "client", "sse"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["difysdk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
