"""Scene models, ray tracing, particle simulation and texture codecs for a small 3D renderer."""

__version__ = "0.1.0"