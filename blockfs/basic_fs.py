"""Low-level file system layer: formatting and block allocation."""

from __future__ import annotations

import os

from .blocks import BLOCK_SIZE, NUM_BLOCKS, DirBlock, SuperBlock
from .disk import Disk


class BasicFileSys:
    """Allocates and frees blocks on a simulated disk."""

    def __init__(self, path: str | os.PathLike[str] = "DISK") -> None:
        self._disk = Disk(path)

    def mount(self) -> bool:
        """Mount the disk, formatting it if it was just created.

        Return True if a new disk was created.
        """
        if not self._disk.mount():
            return False

        superblock = SuperBlock()
        superblock.set_used(0, True)
        superblock.set_used(1, True)
        self._disk.write_block(0, superblock.to_bytes())
        self._disk.write_block(1, DirBlock().to_bytes())

        empty = bytes(BLOCK_SIZE)
        for block_num in range(2, NUM_BLOCKS):
            self._disk.write_block(block_num, empty)
        return True

    def unmount(self) -> None:
        self._disk.unmount()

    def _superblock(self) -> SuperBlock:
        return SuperBlock.from_bytes(self._disk.read_block(0))

    def get_free_block(self) -> int:
        """Claim the lowest free block and return its number, or 0 if full."""
        superblock = self._superblock()
        free = next(
            (num for num in range(NUM_BLOCKS) if not superblock.is_used(num)), 0
        )
        if free:
            superblock.set_used(free, True)
            self._disk.write_block(0, superblock.to_bytes())
        return free

    def reclaim_block(self, block_num: int) -> None:
        """Mark a block as free for later use."""
        superblock = self._superblock()
        superblock.set_used(block_num, False)
        self._disk.write_block(0, superblock.to_bytes())

    def read_block(self, block_num: int) -> bytes:
        return self._disk.read_block(block_num)

    def write_block(self, block_num: int, data: bytes) -> None:
        self._disk.write_block(block_num, data)