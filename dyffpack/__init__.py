"""Implementation subsystems for dyffkit."""

__version__ = "0.1.0"
