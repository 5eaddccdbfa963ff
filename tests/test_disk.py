import pytest

from blockfs.blocks import BLOCK_SIZE, NUM_BLOCKS
from blockfs.disk import Disk, DiskError


@pytest.fixture
def disk_path(tmp_path):
    return tmp_path / "DISK"


def test_mount_creates_then_reopens(disk_path):
    disk = Disk(disk_path)
    assert disk.mount() is True
    assert disk_path.exists()
    disk.unmount()
    assert disk.mount() is False
    disk.unmount()


def test_write_read_round_trip(disk_path):
    with Disk(disk_path) as disk:
        payload = bytes(range(BLOCK_SIZE))
        disk.write_block(3, payload)
        assert disk.read_block(3) == payload


def test_block_offsets(disk_path):
    with Disk(disk_path) as disk:
        disk.write_block(0, b"a" * BLOCK_SIZE)
        disk.write_block(1, b"b" * BLOCK_SIZE)
    assert disk_path.read_bytes() == b"a" * BLOCK_SIZE + b"b" * BLOCK_SIZE


def test_data_persists(disk_path):
    with Disk(disk_path) as disk:
        disk.write_block(NUM_BLOCKS - 1, b"z" * BLOCK_SIZE)
    with Disk(disk_path) as disk:
        assert disk.read_block(NUM_BLOCKS - 1) == b"z" * BLOCK_SIZE


@pytest.mark.parametrize("block_num", [-1, NUM_BLOCKS])
def test_invalid_block_number(disk_path, block_num):
    with Disk(disk_path) as disk:
        with pytest.raises(DiskError, match="Invalid block number"):
            disk.read_block(block_num)
        with pytest.raises(DiskError, match="Invalid block number"):
            disk.write_block(block_num, bytes(BLOCK_SIZE))


def test_short_read_fails(disk_path):
    with Disk(disk_path) as disk:
        with pytest.raises(DiskError, match="Failed to read entire block"):
            disk.read_block(0)


def test_wrong_size_write_fails(disk_path):
    with Disk(disk_path) as disk:
        with pytest.raises(DiskError):
            disk.write_block(0, b"short")


def test_unmounted_access_fails(disk_path):
    disk = Disk(disk_path)
    with pytest.raises(DiskError):
        disk.read_block(0)


def test_cannot_create_fails(tmp_path):
    disk = Disk(tmp_path / "missing" / "DISK")
    with pytest.raises(DiskError, match="Could not create disk"):
        disk.mount()