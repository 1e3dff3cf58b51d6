"""Line-granular source indexing for code search."""

__version__ = "0.1.0"
