"""Work through a recurring set of files one at a time."""

__version__ = "0.1.0"
