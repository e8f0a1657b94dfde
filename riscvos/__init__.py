"""Memory model, user library and utilities of a small RISC-V teaching operating system."""

__version__ = "0.1.0"