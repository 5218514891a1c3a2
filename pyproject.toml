[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysmisc"
version = "1.0.0"
description = "Small file utilities: xdelta3 AppHeader fixer, INI value lookup, Kies backup decrypter and a PE certificate-check patcher"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = ["xdelta3", "vcdiff", "appheader", "ini", "kies", "decrypt", "pe", "patch"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fixdelta = "sysmisc.fixdelta:main"
kiesdec = "sysmisc.kiesdec:main"

[tool.hatch.build.targets.wheel]
packages = ["sysmisc"]

[tool.pytest.ini_options]
addopts = "-ra"
