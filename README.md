# riscvos

Pieces of a small RISC-V teaching operating system as an ordinary
Python package: the Sv39 memory layout and page-table code, the ELF
header format, user-space C library helpers, a first-fit `malloc`, a
random-number generator, file-system stress writers, and a handful of
user programs (`sh`, `grep`, `wc`, `cat`, `echo`, `kill`, `ln`,
`mkdir`, `rm`).

It is meant for studying and experimenting with how these parts work,
without a cross-compiler or an emulator. There are no third-party
dependencies.

## Installing

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Commands

Each user program is installed as a command that works on the host's
files and standard streams:

| Command         | What it does                                                  |
|-----------------|---------------------------------------------------------------|
| `riscvos-sh`    | interactive shell with pipes, `;`, `&`, `<`, `>`, `>>`, `( )` |
| `riscvos-grep`  | prints lines matching a pattern (`^ . * $` only)              |
| `riscvos-wc`    | line, word and byte counts                                    |
| `riscvos-cat`   | copies files, or standard input, to standard output           |
| `riscvos-echo`  | prints its arguments                                          |
| `riscvos-kill`  | sends a kill signal to each pid given                         |
| `riscvos-ln`    | makes a hard link: `riscvos-ln old new`                       |
| `riscvos-mkdir` | creates directories, stopping at the first failure            |
| `riscvos-rm`    | removes files or empty directories, stopping at the first failure |

```
riscvos-echo hello world | riscvos-grep 'w.r'
riscvos-wc README.md
```

`riscvos-grep` only prints complete, newline-terminated lines.

### The shell

`riscvos-sh` prompts with `$ ` on standard error, reads lines of up to
99 characters, and handles `cd` itself. The only programs it can run
are its built-in `echo`, `cat`, `wc` and `grep`; any other name prints
`exec NAME failed`. Pipelines run one stage after the other, the output
of the left side collected in memory and then fed to the right side.
Commands ending in `&` run on a background thread, and the shell waits
for them before it exits.

## Library

### Memory layout — `riscvos.layout`

System parameters (`NPROC`, `NOFILE`, `MAXPATH`, `FSSIZE`, ...), the
physical layout (`KERNBASE`, `PHYSTOP`, `UART0`, `VIRTIO0`, `PLIC`,
`TRAMPOLINE`, `TRAPFRAME`), and page arithmetic and the Sv39 entry
format: `pgroundup`, `pgrounddown`, `pa2pte`, `pte2pa`, `pte_flags`,
`px`, `pxshift`, `make_satp`, and `kstack`, `plic_senable`,
`plic_spriority`, `plic_sclaim`. Flag sets are the enums `PteFlag`,
`OpenFlag` and `SbrkMode`.

```python
from riscvos.layout import pgroundup, px

pgroundup(1)        # 4096
px(0, 0x1000)       # 1
```

### Page tables — `riscvos.vm`

`PhysicalMemory(base, size)` simulates a range of RAM handed out a page
at a time by `kalloc`/`kfree`, with `read`, `write`, `read_pte`,
`write_pte` and `free_pages`. A `PageTable` lives in that memory and
offers `walk`, `pte`, `walkaddr`, `mappages`, `unmap`, `grow`,
`shrink`, `copy_into`, `clear_user`, `copyin`, `copyout`, `copyinstr`,
`vmfault`, `ismapped`, `freewalk` and `free`. Conditions the kernel
would panic on raise `VMPanic`; running out of pages raises
`OutOfMemory`; unreadable or unwritable user addresses raise
`BadAddress`. `kvmmake(memory, etext, trampoline)` builds the kernel's
direct-mapped table.

### ELF — `riscvos.elf`

`parse_elf_header` and `parse_program_headers` read the file and
program headers into `ElfHeader` and `ProgramHeader`, which `pack`
back to little-endian bytes; `ProgramHeader.is_loadable` tells a
loadable segment. Malformed input raises `ElfFormatError`. `ProgFlag`
holds the segment permission bits.

### User library — `riscvos.printf`, `riscvos.ulib`, `riscvos.umalloc`

`sprintf` and `fprintf` understand `%d %u %x` (with `l`/`ll`), `%p`,
`%c`, `%s` and `%%`; hexadecimal digits are upper case, and an unknown
sequence is printed as it stands.

```python
from riscvos.printf import sprintf

sprintf("%d %x %s", -7, 255, "ok")   # '-7 FF ok'
```

`atoi`, `strcmp` and `gets(stream, max)` behave as their C namesakes.
`Heap` is the first-fit free-list allocator with `malloc`, `free` and
`free_blocks`, growing an `Arena` through `sbrk`; an `Arena` raises
`MemoryError` when the break would leave its range.

### Programs as functions

`riscvos.grep.match` and `grep`, and `riscvos.textutils.wc` (returning
a `WordCount`), `cat` and `echo` can be called directly.
`riscvos.shell.parse_command` turns a command line into `ExecCmd`,
`RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd` trees, raising
`ShellSyntaxError` on bad input; `Tokenizer` does the splitting, and
`Shell(commands, cwd)` runs trees against a table of callables
`program(argv, stdin, stdout, stderr)`.

```python
from riscvos.shell import parse_command

parse_command("ls | grep x > out; echo done &")
```

`riscvos.prng` has `do_rand` and the iterator `ParkMiller`, the
minimal-standard random generator. `riscvos.stress` has
`write_pattern`, and the file-system stress loads `logstress` and
`stressfs`, which run their writers on threads.

## What it does not do

There is no kernel here: no scheduler, no processes, no system calls,
no file system or disk image, and nothing boots. The page tables and
allocators work on simulated memory only, and the commands act on the
host's own files and processes.