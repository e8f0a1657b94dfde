[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "riscvos"
version = "0.1.0"
description = "Memory model, user library and utilities of a small RISC-V teaching operating system"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating-system",
    "teaching",
    "sv39",
    "page-table",
    "virtual-memory",
    "shell",
    "elf",
    "malloc",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
riscvos-sh = "riscvos.shell:main"
riscvos-grep = "riscvos.grep:main"
riscvos-wc = "riscvos.textutils:wc_main"
riscvos-cat = "riscvos.textutils:cat_main"
riscvos-echo = "riscvos.textutils:echo_main"
riscvos-kill = "riscvos.fileutils:kill_main"
riscvos-ln = "riscvos.fileutils:ln_main"
riscvos-mkdir = "riscvos.fileutils:mkdir_main"
riscvos-rm = "riscvos.fileutils:rm_main"

[tool.hatch.build.targets.wheel]
packages = ["riscvos"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
