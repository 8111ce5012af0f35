[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cfdnsupdater"
version = "1.1.0"
description = "Keep Cloudflare A and AAAA records pointed at your current public IP address"
requires-python = ">=3.10"
keywords = ["cloudflare", "dns", "dynamic-dns", "ddns", "ipv6"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Networking",
]
dependencies = [
    "requests>=2.26",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "responses>=0.23",
]

[project.scripts]
cfdnsupdater = "cfdnsupdater.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["cfdnsupdater"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
