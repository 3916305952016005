[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sccpolicy"
version = "0.1.0"
description = "Security context constraint building blocks: seccomp, SELinux and sysctl strategies, security context accessors and namespace pre-allocation"
requires-python = ">=3.10"
dependencies = []
keywords = ["security-context", "scc", "seccomp", "selinux", "sysctl", "pods", "admission"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sccpolicy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
