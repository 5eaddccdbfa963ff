"""Command line shell for the block file system."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from typing import TextIO

from .filesys import FileStat, FileSys, FileSysError

PROMPT = "FS> "

_NO_ARGS = frozenset({"ls", "home", "quit"})
_ONE_ARG = frozenset({"mkdir", "cd", "rmdir", "create", "cat", "rm", "stat"})
_TWO_ARGS = frozenset({"append", "tail"})

_NUMBER = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_ULONG_MAX = 2**64 - 1
_UINT_MASK = 2**32 - 1


class CommandLineError(Exception):
    """Raised for a command line that cannot be run."""


@dataclass(frozen=True)
class Command:
    """A parsed command line."""

    name: str
    file_name: str = ""
    append_data: str = ""


def parse_command(line: str) -> Command | None:
    """Parse a command line; return None for a blank line.

    Raise CommandLineError for unknown commands or wrong argument counts.
    """
    tokens = line.split()
    if not tokens:
        return None
    name = tokens[0]
    if name in _NO_ARGS:
        expected = 1
    elif name in _ONE_ARG:
        expected = 2
    elif name in _TWO_ARGS:
        expected = 3
    else:
        raise CommandLineError(f"Invalid command line: {name} is not a command")
    if len(tokens) != expected:
        raise CommandLineError(
            f"Invalid command line: {name} has improper number of arguments"
        )
    return Command(*tokens)


def _parse_byte_count(text: str) -> int:
    """Read an unsigned byte count the way strtoul with base 0 does."""
    match = _NUMBER.match(text)
    if match is None:
        return 0
    sign, digits = match.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif digits.startswith("0"):
        value = int(digits, 8)
    else:
        value = int(digits, 10)
    if value > _ULONG_MAX:
        raise CommandLineError(
            f"Invalid command line: {text} is not a valid number of bytes"
        )
    if sign == "-":
        value = (-value) & _ULONG_MAX
    return value & _UINT_MASK


def _format_stat(info: FileStat) -> list[str]:
    if info.is_directory:
        return [
            f"Directory name: {info.name}/",
            f"Directory block: {info.block_num}",
        ]
    return [
        f"Inode block: {info.block_num}",
        f"Bytes in file: {info.size}",
        f"Number of blocks: {info.num_blocks}",
        f"First block: {info.first_block}",
    ]


class Shell:
    """Reads commands and runs them against a mounted file system."""

    def __init__(
        self,
        disk_path: str | os.PathLike[str] = "DISK",
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.filesys = FileSys(disk_path)
        self._out = out
        self._err = err

    @property
    def _stdout(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def _stderr(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def _print(self, text: str = "") -> None:
        self._stdout.write(text + "\n")

    def execute_command(self, line: str) -> bool:
        """Run one command line. Return True if the user asked to quit."""
        try:
            command = parse_command(line)
            if command is None:
                return False
            return self._dispatch(command)
        except CommandLineError as exc:
            self._stderr.write(f"{exc}\n")
            return False
        except FileSysError as exc:
            self._print(str(exc))
            return False

    def _dispatch(self, command: Command) -> bool:
        fs = self.filesys
        name = command.file_name
        match command.name:
            case "mkdir":
                fs.mkdir(name)
            case "cd":
                fs.cd(name)
            case "home":
                fs.home()
            case "rmdir":
                fs.rmdir(name)
            case "ls":
                entries = fs.ls()
                self._stdout.write("".join(f"{e}\n" for e in entries) or "\n")
            case "create":
                fs.create(name)
            case "append":
                fs.append(name, command.append_data)
            case "cat":
                self._print(fs.cat(name))
            case "tail":
                count = _parse_byte_count(command.append_data)
                self._print(fs.tail(name, count))
            case "rm":
                fs.rm(name)
            case "stat":
                for text in _format_stat(fs.stat(name)):
                    self._print(text)
            case "quit":
                return True
        return False

    def run(self, stdin: TextIO | None = None) -> None:
        """Prompt for and run commands until quit or end of input."""
        source = stdin if stdin is not None else sys.stdin
        self.filesys.mount()
        try:
            while True:
                self._stdout.write(PROMPT)
                self._stdout.flush()
                line = source.readline()
                if not line:
                    break
                if self.execute_command(line.rstrip("\n")):
                    break
        finally:
            self.filesys.unmount()

    def run_script(self, path: str | os.PathLike[str]) -> None:
        """Run the commands in a script file, echoing each one."""
        try:
            script = open(path, encoding="utf-8")
        except OSError:
            self._stderr.write("Could not open script file\n")
            return
        with script:
            self.filesys.mount()
            try:
                for line in script:
                    # A final line without a newline is not run.
                    if not line.endswith("\n"):
                        break
                    text = line[:-1]
                    self._print(PROMPT + text)
                    if self.execute_command(text):
                        break
            finally:
                self.filesys.unmount()


def main(argv: list[str] | None = None) -> int:
    """Start the shell interactively, or run a script with -s <script>."""
    args = sys.argv[1:] if argv is None else argv
    shell = Shell()
    if not args:
        shell.run()
    elif len(args) == 2 and args[0] == "-s":
        shell.run_script(args[1])
    else:
        sys.stderr.write(
            "Invalid command line\n"
            "Usage (one of the following): \n"
            "blockfs\n"
            "blockfs -s <script-name> \n"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())