[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "localpv"
version = "0.1.0"
description = "Configuration, validation and helper-pod logic for dynamic local persistent volume provisioning"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "storage", "local-pv", "hostpath", "provisioner", "quota"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["localpv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
