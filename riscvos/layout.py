"""Sv39 paging helpers, the physical memory layout and system parameters."""

from enum import IntEnum, IntFlag

# System parameters.
NPROC = 64  # maximum number of processes
NCPU = 8  # maximum number of CPUs
NOFILE = 16  # open files per process
NFILE = 100  # open files per system
NINODE = 50  # maximum number of active i-nodes
NDEV = 10  # maximum major device number
ROOTDEV = 1  # device number of file system root disk
MAXARG = 32  # max exec arguments
MAXOPBLOCKS = 10  # max # of blocks any FS op writes
LOGBLOCKS = MAXOPBLOCKS * 3  # max data blocks in on-disk log
NBUF = MAXOPBLOCKS * 3  # size of disk block cache
FSSIZE = 2000  # size of file system in blocks
MAXPATH = 128  # maximum file path name
USERSTACK = 1  # user stack pages

# Paging.
PGSIZE = 4096  # bytes per page
PGSHIFT = 12  # bits of offset within a page
PXMASK = 0x1FF  # 9 bits of page-table index
PTES_PER_TABLE = 512
# One beyond the highest virtual address; one bit less than Sv39 allows,
# so that addresses never need sign extension.
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)
SATP_SV39 = 8 << 60

# Machine status register.
MSTATUS_MPP_MASK = 3 << 11
MSTATUS_MPP_M = 3 << 11
MSTATUS_MPP_S = 1 << 11
MSTATUS_MPP_U = 0 << 11

# Supervisor status register.
SSTATUS_SPP = 1 << 8
SSTATUS_SPIE = 1 << 5
SSTATUS_UPIE = 1 << 4
SSTATUS_SIE = 1 << 1
SSTATUS_UIE = 1 << 0

# Interrupt enables.
SIE_SEIE = 1 << 9
SIE_STIE = 1 << 5
MIE_STIE = 1 << 5

# Physical memory layout of the qemu "virt" machine.
UART0 = 0x10000000
UART0_IRQ = 10
VIRTIO0 = 0x10001000
VIRTIO0_IRQ = 1
PLIC = 0x0C000000
PLIC_PRIORITY = PLIC + 0x0
PLIC_PENDING = PLIC + 0x1000
KERNBASE = 0x80000000
PHYSTOP = KERNBASE + 128 * 1024 * 1024

# Virtual layout: the trampoline sits at the top of every address space,
# the trap frame just beneath it.
TRAMPOLINE = MAXVA - PGSIZE
TRAPFRAME = TRAMPOLINE - PGSIZE


class PteFlag(IntFlag):
    """Bits of a page-table entry."""

    V = 1 << 0  # valid
    R = 1 << 1
    W = 1 << 2
    X = 1 << 3
    U = 1 << 4  # user can access


class OpenFlag(IntFlag):
    """Mode bits accepted by open()."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


class SbrkMode(IntEnum):
    """How sbrk grows the heap."""

    EAGER = 1
    LAZY = 2


def pgroundup(sz):
    """Round a size up to a page boundary."""
    return (int(sz) + PGSIZE - 1) & ~(PGSIZE - 1)


def pgrounddown(a):
    """Round an address down to a page boundary."""
    return int(a) & ~(PGSIZE - 1)


def pa2pte(pa):
    """Shift a physical address into PTE position."""
    return (int(pa) >> 12) << 10


def pte2pa(pte):
    """Extract the physical address held in a PTE."""
    return (int(pte) >> 10) << 12


def pte_flags(pte):
    """The low ten flag bits of a PTE."""
    return int(pte) & 0x3FF


def pxshift(level):
    """Bit position of the page-table index for a level."""
    return PGSHIFT + 9 * level


def px(level, va):
    """The 9-bit page-table index of a virtual address at a level."""
    return (int(va) >> pxshift(level)) & PXMASK


def make_satp(pagetable):
    """The satp value that selects Sv39 with the given root page table."""
    return SATP_SV39 | (int(pagetable) >> 12)


def kstack(p):
    """Virtual address of process slot p's kernel stack, below the trampoline."""
    return TRAMPOLINE - (p + 1) * 2 * PGSIZE


def plic_senable(hart):
    """Supervisor-mode interrupt enable register of a hart."""
    return PLIC + 0x2080 + hart * 0x100


def plic_spriority(hart):
    """Supervisor-mode priority threshold register of a hart."""
    return PLIC + 0x201000 + hart * 0x2000


def plic_sclaim(hart):
    """Supervisor-mode claim/complete register of a hart."""
    return PLIC + 0x201004 + hart * 0x2000