"""CPU load, V3D GPU load and VideoCore SoC temperature readings for Linux."""

__version__ = "1.0"