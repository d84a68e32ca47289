"""reflectbin: an HTTP request and response inspection service."""

__version__ = "0.1.0"
