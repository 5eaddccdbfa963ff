"""On-disk block layouts: superblock, directory blocks and inodes."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

# Size of a block in bytes; must be a power of two.
BLOCK_SIZE = 128

# Number of blocks, chosen so the free-block bitmap fits in one block.
NUM_BLOCKS = BLOCK_SIZE * 8

# Longest file name, not counting the terminating NUL.
MAX_FNAME_SIZE = 9

# Number of entries in a directory block.
MAX_DIR_ENTRIES = (BLOCK_SIZE - 8) // 12

# Number of direct data block indices in an inode.
MAX_DATA_BLOCKS = (BLOCK_SIZE - 8) // 2

# Largest size a data file can reach.
MAX_FILE_SIZE = MAX_DATA_BLOCKS * BLOCK_SIZE

# Magic numbers that tell directory blocks and inodes apart.
DIR_MAGIC_NUM = 0xFFFFFFFF
INODE_MAGIC_NUM = 0xFFFFFFFE

_HEADER = struct.Struct("<II")
_DIR_ENTRY = struct.Struct(f"<{MAX_FNAME_SIZE + 1}sh")
_INODE_BLOCKS = struct.Struct(f"<{MAX_DATA_BLOCKS}h")


def _check_size(data: bytes) -> None:
    if len(data) != BLOCK_SIZE:
        raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(data)}")


@dataclass
class DirEntry:
    """One directory entry; a block number of 0 marks it unused."""

    name: str = ""
    block_num: int = 0

    def _encode(self) -> bytes:
        raw = self.name.encode("utf-8")
        if len(raw) > MAX_FNAME_SIZE:
            raise ValueError(f"file name {self.name!r} is too long")
        return _DIR_ENTRY.pack(raw, self.block_num)

    @classmethod
    def _decode(cls, data: bytes) -> DirEntry:
        raw, block_num = _DIR_ENTRY.unpack(data)
        name = raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return cls(name, block_num)


@dataclass
class SuperBlock:
    """Bitmap of used blocks; block 0 of the disk."""

    bitmap: bytearray = field(default_factory=lambda: bytearray(BLOCK_SIZE))

    def _locate(self, block_num: int) -> tuple[int, int]:
        if not 0 <= block_num < NUM_BLOCKS:
            raise ValueError(f"block number {block_num} out of range")
        return divmod(block_num, 8)

    def is_used(self, block_num: int) -> bool:
        """Return whether the block is marked as used."""
        byte, bit = self._locate(block_num)
        return bool(self.bitmap[byte] & (1 << bit))

    def set_used(self, block_num: int, used: bool) -> None:
        """Mark the block as used or free."""
        byte, bit = self._locate(block_num)
        if used:
            self.bitmap[byte] |= 1 << bit
        else:
            self.bitmap[byte] &= ~(1 << bit) & 0xFF

    def to_bytes(self) -> bytes:
        if len(self.bitmap) != BLOCK_SIZE:
            raise ValueError(f"bitmap must be {BLOCK_SIZE} bytes")
        return bytes(self.bitmap)

    @classmethod
    def from_bytes(cls, data: bytes) -> SuperBlock:
        _check_size(data)
        return cls(bytearray(data))


@dataclass
class DirBlock:
    """A directory: a fixed table of entries."""

    magic: int = DIR_MAGIC_NUM
    num_entries: int = 0
    entries: list[DirEntry] = field(
        default_factory=lambda: [DirEntry() for _ in range(MAX_DIR_ENTRIES)]
    )

    def to_bytes(self) -> bytes:
        if len(self.entries) != MAX_DIR_ENTRIES:
            raise ValueError(f"directory must have {MAX_DIR_ENTRIES} entries")
        body = b"".join(entry._encode() for entry in self.entries)
        return _HEADER.pack(self.magic, self.num_entries) + body

    @classmethod
    def from_bytes(cls, data: bytes) -> DirBlock:
        _check_size(data)
        magic, num_entries = _HEADER.unpack_from(data)
        size = _DIR_ENTRY.size
        start = _HEADER.size
        entries = [
            DirEntry._decode(data[offset:offset + size])
            for offset in range(start, start + size * MAX_DIR_ENTRIES, size)
        ]
        return cls(magic, num_entries, entries)


@dataclass
class Inode:
    """Index node of a data file: its size and direct data block numbers."""

    magic: int = INODE_MAGIC_NUM
    size: int = 0
    blocks: list[int] = field(default_factory=lambda: [0] * MAX_DATA_BLOCKS)

    def to_bytes(self) -> bytes:
        if len(self.blocks) != MAX_DATA_BLOCKS:
            raise ValueError(f"inode must have {MAX_DATA_BLOCKS} block slots")
        return _HEADER.pack(self.magic, self.size) + _INODE_BLOCKS.pack(*self.blocks)

    @classmethod
    def from_bytes(cls, data: bytes) -> Inode:
        _check_size(data)
        magic, size = _HEADER.unpack_from(data)
        blocks = list(_INODE_BLOCKS.unpack_from(data, _HEADER.size))
        return cls(magic, size, blocks)


def is_directory_block(data: bytes) -> bool:
    """Return whether raw block bytes hold a directory."""
    (magic,) = struct.unpack_from("<I", data)
    return magic == DIR_MAGIC_NUM