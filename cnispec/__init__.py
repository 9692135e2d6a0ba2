"""Container Network Interface types, result version conversion and version negotiation."""

__version__ = "1.1.0"

__all__ = [
    "args",
    "convert",
    "create",
    "plugin",
    "reconcile",
    "types",
    "types020",
    "types040",
    "types100",
    "utils",
    "version",
]