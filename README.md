# blockfs

blockfs is a small file system that lives inside one disk image file. The disk
is a flat array of 1024 blocks. Each block is 128 bytes.

- Block 0 is the superblock. It holds a bitmap of the blocks in use.
- Block 1 is the root directory.
- Every other block is a directory block, an inode, or a data block.

A directory holds at most 10 entries. A name can be at most 9 bytes long in
UTF-8. A file can use up to 60 data blocks, so it can hold at most 7680 bytes.

## Installing

```
pip install .
```

## The shell

To start an interactive session, run:

```
blockfs
```

The session works on the disk image `DISK` in the current directory. If `DISK`
does not exist yet, it is created and formatted. The shell shows the prompt
`FS> ` and reads commands until you type `quit` or input ends.

To run the commands in a script file, one per line, run:

```
blockfs -s script.txt
```

Each command is echoed after the `FS> ` prompt before it runs. A last line
that has no newline at its end is not run.

The shell has these commands:

| Command                | Effect                                               |
|------------------------|------------------------------------------------------|
| `mkdir <name>`         | create a directory                                   |
| `cd <name>`            | enter a subdirectory of the current directory        |
| `home`                 | go back to the root directory                        |
| `rmdir <name>`         | remove an empty directory                            |
| `ls`                   | list the current directory; directory names end in `/` |
| `create <name>`        | create an empty file                                 |
| `append <name> <data>` | append one word of data to a file                    |
| `cat <name>`           | print a file                                         |
| `tail <name> <n>`      | print the last `n` bytes of a file                   |
| `rm <name>`            | delete a file and free its blocks                    |
| `stat <name>`          | show the block numbers and size of a file or directory |
| `quit`                 | leave the shell                                      |

Arguments are split on whitespace, so `append` adds a single word. The byte
count for `tail` can be given in decimal, in hex with a leading `0x`, or in
octal with a leading `0`.

Some command lines are not valid: an unknown command, or a command with the
wrong number of arguments. The shell reports these on standard error. A
command that fails, for example with `File does not exist`, prints its message
on standard output.

## Using it from Python

```python
from blockfs.filesys import FileSys, FileSysError

fs = FileSys("DISK")
fs.mount()  # returns True if the disk image was just created
try:
    fs.mkdir("docs")
    fs.cd("docs")
    fs.create("notes")
    fs.append("notes", "hello")
    print(fs.cat("notes"))      # 'hello'
    print(fs.tail("notes", 3))  # 'llo'
    print(fs.ls())              # ['notes']
    print(fs.stat("notes"))     # FileStat(name='notes', block_num=..., ...)
except FileSysError as exc:
    print(exc)
finally:
    fs.unmount()
```

`ls()` returns a list of names. `cat()` and `tail()` return strings.
`stat()` returns a `FileStat` with `name`, `block_num` and `is_directory`.
For data files it also has `size`, `num_blocks` (the inode counts as one
block) and `first_block`. Failed operations raise `FileSysError`, with the
same message that the shell prints, for example `Directory is full` or
`Append exceeds maximum file size`.

The shell can be driven from Python too. `blockfs.shell.Shell(disk_path, out,
err)` runs commands with `execute_command(line)`, `run(stdin)` and
`run_script(path)`. `blockfs.shell.parse_command(line)` turns one line into a
`Command`. It returns `None` for a blank line and raises `CommandLineError`
for a line that is not valid.

The lower layers can also be used on their own:

- `blockfs.disk.Disk` reads and writes raw blocks and raises `DiskError`.
- `blockfs.basic_fs.BasicFileSys` formats new disks and allocates and frees
  blocks.
- `blockfs.blocks` encodes and decodes `SuperBlock`, `DirBlock`, `DirEntry`
  and `Inode`.

## Limits

- Names are plain entries in the current directory. There are no paths, and
  there is no way to go to a parent directory except `home`, which goes to the
  root.
- There is no rename, copy, truncate or overwrite. Data can only be appended.
- The shell always uses the image file `DISK` in the current directory.