"""Simulated physical memory and three-level Sv39 page tables."""

from .layout import (
    MAXVA,
    PGSIZE,
    PHYSTOP,
    PLIC,
    PTES_PER_TABLE,
    TRAMPOLINE,
    UART0,
    VIRTIO0,
    KERNBASE,
    PteFlag,
    pa2pte,
    pgrounddown,
    pgroundup,
    pte2pa,
    pte_flags,
    px,
)

_V = int(PteFlag.V)
_R = int(PteFlag.R)
_W = int(PteFlag.W)
_X = int(PteFlag.X)
_U = int(PteFlag.U)


class VMPanic(RuntimeError):
    """An inconsistency that the kernel treats as fatal."""


class OutOfMemory(MemoryError):
    """No free physical page was available."""


class BadAddress(ValueError):
    """A user virtual address could not be read or written."""


class PhysicalMemory:
    """A page allocator over a range of simulated physical RAM."""

    def __init__(self, base, size):
        if base % PGSIZE:
            raise ValueError("physical memory base must be page aligned")
        self.base = base
        self.end = base + size - size % PGSIZE
        self._pages = {}
        self._free = list(range(self.end - PGSIZE, base - 1, -PGSIZE))
        self._free_set = set(self._free)

    def _page(self, pa):
        if not self.base <= pa < self.end:
            raise VMPanic(f"physical address {pa:#x} outside RAM")
        page_addr = pgrounddown(pa)
        page = self._pages.get(page_addr)
        if page is None:
            page = self._pages[page_addr] = bytearray(PGSIZE)
        return page, pa - page_addr

    def kalloc(self):
        """Allocate one page and return its physical address."""
        if not self._free:
            raise OutOfMemory("kalloc")
        pa = self._free.pop()
        self._free_set.discard(pa)
        return pa

    def kfree(self, pa):
        """Return a page to the allocator."""
        if pa % PGSIZE or not self.base <= pa < self.end or pa in self._free_set:
            raise VMPanic("kfree")
        self._free.append(pa)
        self._free_set.add(pa)

    def read(self, pa, n):
        """Read n bytes starting at a physical address."""
        out = bytearray()
        while n > 0:
            page, off = self._page(pa)
            chunk = min(n, PGSIZE - off)
            out += page[off:off + chunk]
            pa += chunk
            n -= chunk
        return bytes(out)

    def write(self, pa, data):
        """Write bytes starting at a physical address."""
        view = memoryview(bytes(data))
        while view:
            page, off = self._page(pa)
            chunk = min(len(view), PGSIZE - off)
            page[off:off + chunk] = view[:chunk]
            pa += chunk
            view = view[chunk:]

    def read_pte(self, table, index):
        """Load entry index of the page-table page at table."""
        return int.from_bytes(self.read(table + index * 8, 8), "little")

    def write_pte(self, table, index, value):
        """Store entry index of the page-table page at table."""
        self.write(table + index * 8, int(value).to_bytes(8, "little"))

    def free_pages(self):
        """Number of pages currently free."""
        return len(self._free)


class PageTable:
    """An Sv39 page table whose pages live in a PhysicalMemory."""

    def __init__(self, memory):
        self.memory = memory
        self.root = memory.kalloc()
        memory.write(self.root, bytes(PGSIZE))

    def _load(self, addr):
        return int.from_bytes(self.memory.read(addr, 8), "little")

    def _store(self, addr, value):
        self.memory.write(addr, int(value).to_bytes(8, "little"))

    def walk(self, va, alloc):
        """Physical address of the leaf PTE for va, or None if absent.

        With alloc, missing page-table pages are created; OutOfMemory is
        raised if that fails.
        """
        if va >= MAXVA:
            raise VMPanic("walk")
        table = self.root
        for level in (2, 1):
            index = px(level, va)
            entry = self.memory.read_pte(table, index)
            if entry & _V:
                table = pte2pa(entry)
            else:
                if not alloc:
                    return None
                child = self.memory.kalloc()
                self.memory.write(child, bytes(PGSIZE))
                self.memory.write_pte(table, index, pa2pte(child) | _V)
                table = child
        return table + px(0, va) * 8

    def pte(self, va):
        """The leaf PTE value for va, 0 when there is none."""
        addr = self.walk(va, False)
        return 0 if addr is None else self._load(addr)

    def walkaddr(self, va):
        """Physical address of a mapped user page, or None."""
        if va >= MAXVA:
            return None
        entry = self.pte(va)
        if not entry & _V or not entry & _U:
            return None
        return pte2pa(entry)

    def mappages(self, va, size, pa, perm):
        """Map [va, va+size) to physical memory starting at pa."""
        if va % PGSIZE:
            raise VMPanic("mappages: va not aligned")
        if size % PGSIZE:
            raise VMPanic("mappages: size not aligned")
        if size == 0:
            raise VMPanic("mappages: size")
        perm = int(perm)
        for a in range(va, va + size, PGSIZE):
            addr = self.walk(a, True)
            if self._load(addr) & _V:
                raise VMPanic("mappages: remap")
            self._store(addr, pa2pte(pa + (a - va)) | perm | _V)

    def unmap(self, va, npages, do_free):
        """Remove npages of mappings from va, freeing the pages if asked."""
        if va % PGSIZE:
            raise VMPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            addr = self.walk(a, False)
            if addr is None:
                continue
            entry = self._load(addr)
            if not entry & _V:
                continue
            if do_free:
                self.memory.kfree(pte2pa(entry))
            self._store(addr, 0)

    def grow(self, oldsz, newsz, xperm):
        """Allocate zeroed user pages to grow from oldsz to newsz."""
        if newsz < oldsz:
            return oldsz
        oldsz = pgroundup(oldsz)
        a = oldsz
        try:
            for a in range(oldsz, newsz, PGSIZE):
                mem = self.memory.kalloc()
                self.memory.write(mem, bytes(PGSIZE))
                try:
                    self.mappages(a, PGSIZE, mem, _R | _U | int(xperm))
                except OutOfMemory:
                    self.memory.kfree(mem)
                    raise
        except OutOfMemory:
            self.shrink(a, oldsz)
            raise
        return newsz

    def shrink(self, oldsz, newsz):
        """Free user pages to bring the size down from oldsz to newsz."""
        if newsz >= oldsz:
            return oldsz
        if pgroundup(newsz) < pgroundup(oldsz):
            npages = (pgroundup(oldsz) - pgroundup(newsz)) // PGSIZE
            self.unmap(pgroundup(newsz), npages, True)
        return newsz

    def _freewalk(self, table):
        for index in range(PTES_PER_TABLE):
            entry = self.memory.read_pte(table, index)
            if entry & _V and not entry & (_R | _W | _X):
                self._freewalk(pte2pa(entry))
                self.memory.write_pte(table, index, 0)
            elif entry & _V:
                raise VMPanic("freewalk: leaf")
        self.memory.kfree(table)

    def freewalk(self):
        """Free all page-table pages; every leaf must already be unmapped."""
        self._freewalk(self.root)

    def free(self, sz):
        """Free the user pages below sz, then the page table itself."""
        if sz > 0:
            self.unmap(0, pgroundup(sz) // PGSIZE, True)
        self.freewalk()

    def copy_into(self, new, sz):
        """Copy the first sz bytes of user memory, pages and mappings, into new."""
        for i in range(0, sz, PGSIZE):
            addr = self.walk(i, False)
            if addr is None:
                continue
            entry = self._load(addr)
            if not entry & _V:
                continue
            mem = None
            try:
                mem = self.memory.kalloc()
                self.memory.write(mem, self.memory.read(pte2pa(entry), PGSIZE))
                new.mappages(i, PGSIZE, mem, pte_flags(entry))
            except OutOfMemory:
                if mem is not None:
                    self.memory.kfree(mem)
                new.unmap(0, i // PGSIZE, True)
                raise

    def clear_user(self, va):
        """Make a page inaccessible to user mode, e.g. a stack guard."""
        addr = self.walk(va, False)
        if addr is None:
            raise VMPanic("uvmclear")
        self._store(addr, self._load(addr) & ~_U)

    def copyout(self, dstva, data, sz=0):
        """Copy bytes to user virtual address dstva; sz bounds lazy faults."""
        view = memoryview(bytes(data))
        while view:
            va0 = pgrounddown(dstva)
            if va0 >= MAXVA:
                raise BadAddress(f"{dstva:#x}")
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                pa0 = self.vmfault(va0, sz)
                if pa0 is None:
                    raise BadAddress(f"{dstva:#x}")
            if not self.pte(va0) & _W:
                raise BadAddress(f"{dstva:#x} is read-only")
            n = min(PGSIZE - (dstva - va0), len(view))
            self.memory.write(pa0 + (dstva - va0), view[:n])
            view = view[n:]
            dstva = va0 + PGSIZE

    def copyin(self, srcva, n, sz=0):
        """Copy n bytes from user virtual address srcva."""
        out = bytearray()
        while n > 0:
            va0 = pgrounddown(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                pa0 = self.vmfault(va0, sz)
                if pa0 is None:
                    raise BadAddress(f"{srcva:#x}")
            chunk = min(PGSIZE - (srcva - va0), n)
            out += self.memory.read(pa0 + (srcva - va0), chunk)
            n -= chunk
            srcva = va0 + PGSIZE
        return bytes(out)

    def copyinstr(self, srcva, max):
        """Copy a NUL-terminated string of at most max bytes from user space."""
        out = bytearray()
        remaining = max
        while remaining > 0:
            va0 = pgrounddown(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddress(f"{srcva:#x}")
            n = min(PGSIZE - (srcva - va0), remaining)
            chunk = self.memory.read(pa0 + (srcva - va0), n)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            remaining -= n
            srcva = va0 + PGSIZE
        raise BadAddress("string not terminated")

    def vmfault(self, va, sz):
        """Map a zeroed page for a lazily allocated va below sz.

        Returns the new page's physical address, or None if va is out of
        range, already mapped, or memory is exhausted.
        """
        if va >= sz:
            return None
        va = pgrounddown(va)
        if self.ismapped(va):
            return None
        try:
            mem = self.memory.kalloc()
        except OutOfMemory:
            return None
        self.memory.write(mem, bytes(PGSIZE))
        try:
            self.mappages(va, PGSIZE, mem, _W | _U | _R)
        except OutOfMemory:
            self.memory.kfree(mem)
            return None
        return mem

    def ismapped(self, va):
        """Whether va has a valid leaf PTE."""
        return bool(self.pte(va) & _V)


def kvmmake(memory, etext, trampoline):
    """Build the kernel's direct-mapped page table."""
    kpgtbl = PageTable(memory)

    def kvmmap(va, pa, sz, perm):
        try:
            kpgtbl.mappages(va, sz, pa, perm)
        except OutOfMemory as exc:
            raise VMPanic("kvmmap") from exc

    kvmmap(UART0, UART0, PGSIZE, _R | _W)
    kvmmap(VIRTIO0, VIRTIO0, PGSIZE, _R | _W)
    kvmmap(PLIC, PLIC, 0x4000000, _R | _W)
    kvmmap(KERNBASE, KERNBASE, etext - KERNBASE, _R | _X)
    kvmmap(etext, etext, PHYSTOP - etext, _R | _W)
    kvmmap(TRAMPOLINE, trampoline, PGSIZE, _R | _X)
    return kpgtbl