"""A simulated disk: a host file viewed as an array of fixed-size blocks."""

from __future__ import annotations

import os
from typing import BinaryIO

from .blocks import BLOCK_SIZE, NUM_BLOCKS


class DiskError(Exception):
    """Raised when the simulated disk cannot be used as asked."""


class Disk:
    """Block-level access to the file that backs the disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = path
        self._file: BinaryIO | None = None

    def mount(self) -> bool:
        """Open the disk file, creating it if missing. Return True if created."""
        try:
            self._file = open(self.path, "r+b")
            return False
        except OSError:
            pass
        try:
            self._file = open(self.path, "x+b")
        except OSError as exc:
            raise DiskError("Could not create disk") from exc
        return True

    def unmount(self) -> None:
        """Close the disk file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def _seek(self, block_num: int) -> BinaryIO:
        if self._file is None:
            raise DiskError("Disk is not mounted")
        if not 0 <= block_num < NUM_BLOCKS:
            raise DiskError("Invalid block number")
        offset = block_num * BLOCK_SIZE
        if self._file.seek(offset) != offset:
            raise DiskError("Seek failure")
        return self._file

    def read_block(self, block_num: int) -> bytes:
        """Return the contents of block block_num."""
        data = self._seek(block_num).read(BLOCK_SIZE)
        if len(data) != BLOCK_SIZE:
            raise DiskError("Failed to read entire block")
        return data

    def write_block(self, block_num: int, data: bytes) -> None:
        """Write exactly one block of data to block block_num."""
        if len(data) != BLOCK_SIZE:
            raise DiskError("Failed to write entire block")
        handle = self._seek(block_num)
        handle.write(data)
        handle.flush()

    def __enter__(self) -> Disk:
        self.mount()
        return self

    def __exit__(self, *args: object) -> None:
        self.unmount()