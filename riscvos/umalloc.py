"""A first-fit free-list allocator over a growable program break."""

HEADER_SIZE = 16
_MIN_UNITS = 4096


class Arena:
    """A program break that grows and shrinks below a fixed limit."""

    def __init__(self, limit=1 << 30):
        self.limit = limit
        self.brk = 0

    def sbrk(self, n):
        """Move the break by n bytes and return the old break."""
        old = self.brk
        new = old + n
        if not 0 <= new <= self.limit:
            raise MemoryError(f"sbrk({n}) out of range")
        self.brk = new
        return old


class Heap:
    """malloc and free over an Arena, with coalescing of free neighbours."""

    def __init__(self, arena):
        self.arena = arena
        self._base = -HEADER_SIZE  # sentinel header, below every block
        self._next = {}
        self._size = {}
        self._allocated = set()
        self._freep = None

    def _end(self, header):
        return header + self._size[header] * HEADER_SIZE

    def malloc(self, nbytes):
        """Allocate nbytes and return the address of the usable space."""
        if nbytes < 0:
            raise ValueError("negative allocation size")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._next[self._base] = self._base
            self._size[self._base] = 0
            self._freep = self._base
        prevp = self._freep
        p = self._next[prevp]
        while True:
            size = self._size[p]
            if size >= nunits:
                if size == nunits:
                    self._next[prevp] = self._next.pop(p)
                else:
                    self._size[p] = size - nunits
                    p += (size - nunits) * HEADER_SIZE
                    self._size[p] = nunits
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
            prevp, p = p, self._next[p]

    def _morecore(self, nunits):
        nunits = max(nunits, _MIN_UNITS)
        header = self.arena.sbrk(nunits * HEADER_SIZE)
        self._size[header] = nunits
        self._allocated.add(header)
        self.free(header + HEADER_SIZE)
        return self._freep

    def free(self, ap):
        """Return a block obtained from malloc to the free list."""
        bp = ap - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"free of unallocated pointer {ap:#x}")
        self._allocated.remove(bp)
        nxt = self._next
        p = self._freep
        while not p < bp < nxt[p]:
            if p >= nxt[p] and (bp > p or bp < nxt[p]):
                break
            p = nxt[p]
        if self._end(bp) == nxt[p]:
            q = nxt[p]
            self._size[bp] += self._size.pop(q)
            nxt[bp] = nxt.pop(q)
        else:
            nxt[bp] = nxt[p]
        if self._end(p) == bp:
            self._size[p] += self._size.pop(bp)
            nxt[p] = nxt.pop(bp)
        else:
            nxt[p] = bp
        self._freep = p

    def free_blocks(self):
        """(header address, size in bytes) of each free block, in address order."""
        if self._freep is None:
            return []
        blocks = []
        p = self._next[self._base]
        while p != self._base:
            blocks.append((p, self._size[p] * HEADER_SIZE))
            p = self._next[p]
        return blocks