[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysprobe"
version = "0.1.0"
description = "Collect host and process information: OS, memory, CPU times, network identity and running processes."
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["sysinfo", "host", "process", "monitoring", "fqdn", "windows"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: Microsoft :: Windows",
    "Operating System :: POSIX",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sysprobe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
