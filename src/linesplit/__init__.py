"""linesplit — split large text files by line count and audit the result."""

__version__ = "0.3.0"
