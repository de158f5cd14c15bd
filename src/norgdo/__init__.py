"""norgdo - personal tasks kept as .norg documents."""

__version__ = "0.1.0"
