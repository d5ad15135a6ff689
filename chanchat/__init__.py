"""Line-based TCP chat server with named channels and bounded history."""

__version__ = "0.1.0"
__all__ = ["__version__"]