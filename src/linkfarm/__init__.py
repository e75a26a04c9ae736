"""linkfarm: keep a tree of symbolic links in step with a source tree"""

__version__ = "0.1.0"
