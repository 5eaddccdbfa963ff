"""File system commands built on top of the block layer."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .basic_fs import BasicFileSys
from .blocks import (
    BLOCK_SIZE,
    MAX_DATA_BLOCKS,
    MAX_DIR_ENTRIES,
    MAX_FILE_SIZE,
    MAX_FNAME_SIZE,
    DirBlock,
    DirEntry,
    Inode,
    is_directory_block,
)

_ROOT_BLOCK = 1


class FileSysError(Exception):
    """Raised when a file system command cannot be carried out."""


@dataclass(frozen=True)
class FileStat:
    """What stat reports about a file or directory.

    For directories, size, num_blocks and first_block are None.
    """

    name: str
    block_num: int
    is_directory: bool
    size: int | None = None
    num_blocks: int | None = None
    first_block: int | None = None


def _encode(data: str | bytes) -> bytes:
    return data if isinstance(data, bytes) else data.encode("utf-8")


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class FileSys:
    """A hierarchical file system with a current working directory."""

    def __init__(self, path: str | os.PathLike[str] = "DISK") -> None:
        self._bfs = BasicFileSys(path)
        self._cwd = _ROOT_BLOCK

    def mount(self) -> bool:
        """Mount the disk and go to the root directory.

        Return True if a new disk was created and formatted.
        """
        created = self._bfs.mount()
        self._cwd = _ROOT_BLOCK
        return created

    def unmount(self) -> None:
        self._bfs.unmount()

    def is_directory(self, block_num: int) -> bool:
        """Return whether the given block holds a directory."""
        return is_directory_block(self._bfs.read_block(block_num))

    # -- helpers ---------------------------------------------------------

    def _current(self) -> DirBlock:
        return DirBlock.from_bytes(self._bfs.read_block(self._cwd))

    def _save_current(self, directory: DirBlock) -> None:
        self._bfs.write_block(self._cwd, directory.to_bytes())

    @staticmethod
    def _find(directory: DirBlock, name: str) -> DirEntry | None:
        return next(
            (e for e in directory.entries if e.block_num != 0 and e.name == name),
            None,
        )

    def _find_file(self, name: str) -> int:
        """Return the inode block of a data file in the current directory."""
        entry = self._find(self._current(), name)
        if entry is None:
            raise FileSysError("File does not exist")
        if self.is_directory(entry.block_num):
            raise FileSysError("File is a directory")
        return entry.block_num

    def _read_inode(self, block_num: int) -> Inode:
        return Inode.from_bytes(self._bfs.read_block(block_num))

    def _add_entry(self, name: str, block_num: int, payload: bytes) -> None:
        if len(name.encode("utf-8")) > MAX_FNAME_SIZE:
            raise FileSysError("File name is too long")
        directory = self._current()
        if directory.num_entries >= MAX_DIR_ENTRIES:
            raise FileSysError("Directory is full")
        raise AssertionError  # pragma: no cover

    def _check_new_name(self, name: str) -> DirBlock:
        if len(name.encode("utf-8")) > MAX_FNAME_SIZE:
            raise FileSysError("File name is too long")
        directory = self._current()
        if directory.num_entries >= MAX_DIR_ENTRIES:
            raise FileSysError("Directory is full")
        return directory

    def _link(self, directory: DirBlock, name: str, block_num: int) -> None:
        slot = next((e for e in directory.entries if e.block_num == 0), None)
        if slot is not None:
            slot.name = name
            slot.block_num = block_num
            directory.num_entries += 1
        self._save_current(directory)

    def _unlink(self, directory: DirBlock, entry: DirEntry) -> None:
        entry.block_num = 0
        directory.num_entries -= 1
        self._save_current(directory)

    def _allocate(self) -> int:
        block_num = self._bfs.get_free_block()
        if block_num == 0:
            raise FileSysError("Disk is full")
        return block_num

    def _read_range(self, inode: Inode, start: int, count: int) -> bytes:
        """Collect count bytes of file data beginning at byte offset start."""
        first_block, offset = divmod(start, BLOCK_SIZE)
        chunks: list[bytes] = []
        remaining = count
        for block_num in inode.blocks[first_block:]:
            if remaining <= 0:
                break
            if block_num == 0:
                continue
            data = self._bfs.read_block(block_num)
            take = min(BLOCK_SIZE - offset, remaining)
            chunks.append(data[offset:offset + take])
            remaining -= take
            offset = 0
        return b"".join(chunks)

    # -- commands --------------------------------------------------------

    def mkdir(self, name: str) -> None:
        """Create an empty directory in the current directory."""
        directory = self._check_new_name(name)
        entry = self._find(directory, name)
        if any(
            e.block_num != 0 and e.name == name and self.is_directory(e.block_num)
            for e in directory.entries
        ):
            raise FileSysError("Directory exists")
        del entry
        block_num = self._allocate()
        self._bfs.write_block(block_num, DirBlock().to_bytes())
        self._link(directory, name, block_num)

    def cd(self, name: str) -> None:
        """Change the current directory to a subdirectory."""
        entry = self._find(self._current(), name)
        if entry is None:
            raise FileSysError("File does not exist")
        if not self.is_directory(entry.block_num):
            raise FileSysError("File is not a directory")
        self._cwd = entry.block_num

    def home(self) -> None:
        """Go back to the root directory."""
        self._cwd = _ROOT_BLOCK

    def rmdir(self, name: str) -> None:
        """Remove an empty subdirectory."""
        directory = self._current()
        entry = self._find(directory, name)
        if entry is None:
            raise FileSysError("File does not exist")
        if not self.is_directory(entry.block_num):
            raise FileSysError("File is not a directory")
        target = DirBlock.from_bytes(self._bfs.read_block(entry.block_num))
        if target.num_entries > 0:
            raise FileSysError("Directory is not empty")
        self._bfs.reclaim_block(entry.block_num)
        self._unlink(directory, entry)

    def ls(self) -> list[str]:
        """List the current directory; directory names end with '/'."""
        return [
            entry.name + ("/" if self.is_directory(entry.block_num) else "")
            for entry in self._current().entries
            if entry.block_num != 0
        ]

    def create(self, name: str) -> None:
        """Create an empty data file in the current directory."""
        directory = self._check_new_name(name)
        if any(
            e.block_num != 0 and e.name == name and not self.is_directory(e.block_num)
            for e in directory.entries
        ):
            raise FileSysError("File exists")
        block_num = self._allocate()
        self._bfs.write_block(block_num, Inode().to_bytes())
        self._link(directory, name, block_num)

    def append(self, name: str, data: str | bytes) -> None:
        """Append data to the end of a data file."""
        inode_block = self._find_file(name)
        inode = self._read_inode(inode_block)
        payload = _encode(data)
        if inode.size + len(payload) > MAX_FILE_SIZE:
            raise FileSysError("Append exceeds maximum file size")

        used = [i for i, block in enumerate(inode.blocks) if block != 0]
        last = used[-1] if used else -1
        space = BLOCK_SIZE - inode.size % BLOCK_SIZE if last != -1 else 0

        pos = 0
        while pos < len(payload):
            if last == -1 or space == 0:
                new_block = self._allocate()
                last += 1
                inode.blocks[last] = new_block
                space = BLOCK_SIZE
            block = bytearray(self._bfs.read_block(inode.blocks[last]))
            count = min(space, len(payload) - pos)
            start = BLOCK_SIZE - space
            block[start:start + count] = payload[pos:pos + count]
            self._bfs.write_block(inode.blocks[last], bytes(block))
            pos += count
            space -= count
            inode.size += count

        self._bfs.write_block(inode_block, inode.to_bytes())

    def cat(self, name: str) -> str:
        """Return the whole contents of a data file."""
        inode = self._read_inode(self._find_file(name))
        return _decode(self._read_range(inode, 0, inode.size))

    def tail(self, name: str, n: int) -> str:
        """Return the last n bytes of a data file."""
        if n < 0:
            raise ValueError("byte count must not be negative")
        inode = self._read_inode(self._find_file(name))
        if n >= inode.size:
            return self.cat(name)
        return _decode(self._read_range(inode, inode.size - n, n))

    def rm(self, name: str) -> None:
        """Delete a data file and free its blocks."""
        directory = self._current()
        entry = self._find(directory, name)
        if entry is None:
            raise FileSysError("File does not exist")
        if self.is_directory(entry.block_num):
            raise FileSysError("File is a directory")
        inode = self._read_inode(entry.block_num)
        for block_num in inode.blocks:
            if block_num != 0:
                self._bfs.reclaim_block(block_num)
        self._bfs.reclaim_block(entry.block_num)
        self._unlink(directory, entry)

    def stat(self, name: str) -> FileStat:
        """Describe a file or directory in the current directory."""
        entry = self._find(self._current(), name)
        if entry is None:
            raise FileSysError("File does not exist")
        if self.is_directory(entry.block_num):
            return FileStat(name, entry.block_num, True)
        inode = self._read_inode(entry.block_num)
        data_blocks = sum(1 for block in inode.blocks if block != 0)
        return FileStat(
            name=name,
            block_num=entry.block_num,
            is_directory=False,
            size=inode.size,
            num_blocks=1 + data_blocks,
            first_block=inode.blocks[0],
        )


assert MAX_DATA_BLOCKS * BLOCK_SIZE == MAX_FILE_SIZE