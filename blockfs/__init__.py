"""A block-based file system kept in a single disk image file, with a shell."""

__version__ = "0.1.0"
__all__ = ["blocks", "disk", "basic_fs", "filesys", "shell"]