"""relbump: bump a manifest version, build, publish and clean up."""

__version__ = "0.1.0"
