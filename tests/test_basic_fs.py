import pytest

from blockfs.basic_fs import BasicFileSys
from blockfs.blocks import BLOCK_SIZE, DIR_MAGIC_NUM, NUM_BLOCKS, DirBlock, SuperBlock
from blockfs.disk import DiskError


@pytest.fixture
def bfs(tmp_path):
    fs = BasicFileSys(tmp_path / "DISK")
    fs.mount()
    yield fs
    fs.unmount()


def test_mount_reports_new_disk(tmp_path):
    fs = BasicFileSys(tmp_path / "DISK")
    assert fs.mount() is True
    fs.unmount()
    assert fs.mount() is False
    fs.unmount()


def test_format_disk_size(tmp_path):
    path = tmp_path / "DISK"
    fs = BasicFileSys(path)
    fs.mount()
    fs.unmount()
    assert path.stat().st_size == NUM_BLOCKS * BLOCK_SIZE


def test_format_superblock(bfs):
    superblock = SuperBlock.from_bytes(bfs.read_block(0))
    assert superblock.is_used(0) and superblock.is_used(1)
    assert not any(superblock.is_used(n) for n in range(2, NUM_BLOCKS))


def test_format_root_directory(bfs):
    root = DirBlock.from_bytes(bfs.read_block(1))
    assert root.magic == DIR_MAGIC_NUM
    assert root.num_entries == 0
    assert all(entry.block_num == 0 for entry in root.entries)


def test_format_data_blocks_zeroed(bfs):
    assert bfs.read_block(2) == bytes(BLOCK_SIZE)
    assert bfs.read_block(NUM_BLOCKS - 1) == bytes(BLOCK_SIZE)


def test_allocation_is_lowest_first(bfs):
    first = bfs.get_free_block()
    second = bfs.get_free_block()
    assert first == 2
    assert second == first + 1
    assert SuperBlock.from_bytes(bfs.read_block(0)).is_used(second)


def test_reclaim_reuses_block(bfs):
    blocks = [bfs.get_free_block() for _ in range(5)]
    bfs.reclaim_block(blocks[1])
    assert not SuperBlock.from_bytes(bfs.read_block(0)).is_used(blocks[1])
    assert bfs.get_free_block() == blocks[1]


def test_full_disk_returns_zero(bfs):
    allocated = [bfs.get_free_block() for _ in range(NUM_BLOCKS - 2)]
    assert sorted(allocated) == list(range(2, NUM_BLOCKS))
    assert bfs.get_free_block() == 0


def test_allocation_persists(tmp_path):
    path = tmp_path / "DISK"
    fs = BasicFileSys(path)
    fs.mount()
    taken = fs.get_free_block()
    fs.write_block(taken, b"q" * BLOCK_SIZE)
    fs.unmount()

    fs = BasicFileSys(path)
    fs.mount()
    assert fs.read_block(taken) == b"q" * BLOCK_SIZE
    assert fs.get_free_block() == taken + 1
    fs.unmount()


def test_invalid_block_raises(bfs):
    with pytest.raises(DiskError):
        bfs.read_block(NUM_BLOCKS)