"""The ELF executable file header and program headers."""

import struct
from dataclasses import dataclass
from enum import IntFlag

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word
ELF_PROG_LOAD = 1

_ELFHDR = struct.Struct("<I12sHHIQQQIHHHHHH")
_PROGHDR = struct.Struct("<IIQQQQQQ")


class ElfFormatError(ValueError):
    """The bytes are not a well-formed ELF image."""


class ProgFlag(IntFlag):
    """Permission bits of a program header."""

    EXEC = 1
    WRITE = 2
    READ = 4


@dataclass
class ElfHeader:
    """The ELF file header."""

    SIZE = _ELFHDR.size

    magic: int = ELF_MAGIC
    ident: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    def pack(self):
        """Encode the header as little-endian bytes."""
        return _ELFHDR.pack(
            self.magic, self.ident, self.type, self.machine, self.version,
            self.entry, self.phoff, self.shoff, self.flags, self.ehsize,
            self.phentsize, self.phnum, self.shentsize, self.shnum, self.shstrndx,
        )


@dataclass
class ProgramHeader:
    """One program segment header."""

    SIZE = _PROGHDR.size

    type: int = 0
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    def pack(self):
        """Encode the header as little-endian bytes."""
        return _PROGHDR.pack(
            self.type, self.flags, self.off, self.vaddr,
            self.paddr, self.filesz, self.memsz, self.align,
        )

    def is_loadable(self):
        """Whether the segment is to be loaded into memory."""
        return self.type == ELF_PROG_LOAD


def parse_elf_header(data):
    """Decode and check the file header at the start of an ELF image."""
    if len(data) < _ELFHDR.size:
        raise ElfFormatError("file too short for an ELF header")
    header = ElfHeader(*_ELFHDR.unpack_from(data, 0))
    if header.magic != ELF_MAGIC:
        raise ElfFormatError("bad ELF magic")
    return header


def parse_program_headers(data, header):
    """Decode the program headers that the file header describes."""
    offsets = (header.phoff + n * _PROGHDR.size for n in range(header.phnum))
    result = []
    for off in offsets:
        if off + _PROGHDR.size > len(data):
            raise ElfFormatError("program header beyond end of file")
        result.append(ProgramHeader(*_PROGHDR.unpack_from(data, off)))
    return result