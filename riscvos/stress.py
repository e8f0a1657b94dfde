"""Concurrent file-writing stress loads for the file system."""

import os
import sys
from concurrent.futures import ThreadPoolExecutor

_STRESSFS_BLOCK = 512
_STRESSFS_BLOCKS = 20


def _fill_byte(fill):
    if isinstance(fill, int):
        return bytes([fill & 0xFF])
    data = fill.encode("latin-1") if isinstance(fill, str) else bytes(fill)
    if len(data) != 1:
        raise ValueError("fill must be a single byte")
    return data


def write_pattern(path, fill, count, size):
    """Write count blocks of size copies of fill at the start of path.

    The file is created if needed but not truncated. A short write raises
    OSError.
    """
    block = _fill_byte(fill) * size
    fd = os.open(path, os.O_CREAT | os.O_RDWR, 0o666)
    with os.fdopen(fd, "r+b", buffering=0) as f:
        for _ in range(count):
            n = f.write(block)
            if n != size:
                raise OSError(f"write failed {n}")


def logstress(paths, count=250, size=2000):
    """Write to each path concurrently, the n-th (from 1) filled with digit n."""
    paths = list(paths)
    with ThreadPoolExecutor(max_workers=max(1, len(paths))) as pool:
        futures = [
            pool.submit(write_pattern, path, ord("0") + i, count, size)
            for i, path in enumerate(paths, start=1)
        ]
    for future in futures:
        future.result()


def stressfs(directory, workers=5):
    """Have workers each write then read back their own file; return the paths."""
    if workers < 1:
        raise ValueError("at least one worker is needed")
    sys.stdout.write("stressfs starting\n")

    def worker(i):
        sys.stdout.write(f"write {i}\n")
        path = os.path.join(directory, "stressfs" + chr(ord("0") + i))
        write_pattern(path, "a", _STRESSFS_BLOCKS, _STRESSFS_BLOCK)
        sys.stdout.write("read\n")
        with open(path, "rb") as f:
            for _ in range(_STRESSFS_BLOCKS):
                f.read(_STRESSFS_BLOCK)
        return path

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(worker, range(workers)))