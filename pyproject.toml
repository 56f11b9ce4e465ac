[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "calcgrid"
version = "0.1.0"
description = "Distributed arithmetic calculator: an HTTP orchestrator with user accounts, an in-memory task queue and computing agents"
requires-python = ">=3.10"
keywords = ["calculator", "orchestrator", "agent", "task-queue", "jwt", "flask", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "python-dotenv",
    "flask",
    "pyjwt",
    "bcrypt",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
calcgrid-orchestrator = "calcgrid.api:main"
calcgrid-agent = "calcgrid.agent:main"

[tool.hatch.build.targets.wheel]
packages = ["calcgrid"]

[tool.pytest.ini_options]
addopts = "-ra"
