"""
Interactive Shell

Text shell driving hash trees through their public operations.

Modes:
    merkle>  default mode, create a tree
    build>   grow a tree with an IncrementalBuilder
    check>   verify received data against a trusted root digest

Example session:
    merkle> new_check 4 -2146262780
    check> set_val 0 Cuboid(1,2,3)
    check> ready?
    [2,4]
"""

from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import TextIO

from core.config import RuntimeConfig
from core.merkle import GrowableTree, IncrementalBuilder
from core.schemas.bodies import Body, parse_body, parse_integer
from core.schemas.errors import (
    BodyParseException,
    IndexOutOfRangeException,
    ValueConflictException,
)


logger = logging.getLogger(__name__)


# common error messages
NO_VALID_INPUT_MESSAGE = "Error! No valid input: "
NO_VALID_INDEX_MESSAGE = "Error! No valid index: "
COMMAND_DOESNT_EXIST_MESSAGE = "Error! This command does not exist in this mode."
WRONG_PARAMETER_MESSAGE = "Error! Wrong number of parameters for this command."

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ShellMode(IntEnum):
    """Shell modes. BUILD_AND_CHECK marks commands shared by both tree modes."""
    DEFAULT = 0
    BUILD = 1
    CHECK = 2
    BUILD_AND_CHECK = 3


PROMPTS = {
    ShellMode.DEFAULT: "merkle> ",
    ShellMode.BUILD: "build> ",
    ShellMode.CHECK: "check> ",
}


class ShellCommand(Enum):
    """
    All shell commands with their expected token count (command included),
    the mode they belong to and their help text.
    """

    NEW = ("new", 2, ShellMode.DEFAULT,
           "new <capacity>: Creates a new HashTree.")
    PUSH = ("push", 2, ShellMode.BUILD,
            "push <element>: Inserts a new element at the next possible leaf.")
    NEW_CHECK = ("new_check", 3, ShellMode.DEFAULT,
                 "new_check <capacity> <root hash>: Creates a new HashTree and sets the root hash.")
    SET_VAL = ("set_val", 3, ShellMode.CHECK,
               "set_val <leafindex> <element>: Sets the value at a given index.")
    SET_HASH = ("set_hash", 3, ShellMode.CHECK,
                "set_hash <index> <hash>: Sets the hash at a given index.")
    READY = ("ready?", 1, ShellMode.CHECK,
             "ready?: Returns READY! if a check can be done, if not returns the missing indices.")
    CHECK = ("check", 1, ShellMode.CHECK,
             "check: Returns ACK if the tree is consistent, otherwise REJ.")
    CLEAR = ("clear", 1, ShellMode.BUILD_AND_CHECK,
             "clear: Deletes all values in this tree.")
    DEBUG = ("debug", 1, ShellMode.BUILD_AND_CHECK,
             "debug: Returns a textual representation of the current tree.")
    HELP = ("help", 1, ShellMode.DEFAULT,
            "help: Prints this help text.")
    QUIT = ("quit", 1, ShellMode.DEFAULT,
            "quit: Exits this program.")

    def __init__(self, command: str, parameter_count: int, mode: ShellMode, help_text: str) -> None:
        self.command = command
        self.parameter_count = parameter_count
        self.mode = mode
        self.help_text = help_text

    def available_in(self, mode: ShellMode) -> bool:
        if self.mode == ShellMode.DEFAULT or self.mode == mode:
            return True
        return self.mode == ShellMode.BUILD_AND_CHECK and mode != ShellMode.DEFAULT


_COMMANDS_BY_NAME = {cmd.command: cmd for cmd in ShellCommand}


class WrongParameters(Exception):
    """A known command was used with the wrong number of tokens."""


def identify_command(tokens: list[str]) -> ShellCommand | None:
    """
    Identify the command named by the first token.

    Returns:
        The command, or None if no such command exists

    Raises:
        WrongParameters: If the command exists but the token count is wrong
    """
    if not tokens or not tokens[0]:
        return None
    command = _COMMANDS_BY_NAME.get(tokens[0].lower())
    if command is None:
        return None
    if command.parameter_count != len(tokens):
        raise WrongParameters(command.command)
    return command


class Shell:
    """
    Line-oriented shell over arbitrary text streams.

    Args:
        stdin: Stream the commands are read from
        stdout: Stream prompts and results are written to
        config: Runtime configuration (digest scheme, minimum capacity)
    """

    def __init__(self, stdin: TextIO, stdout: TextIO, config: RuntimeConfig | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._config = config or RuntimeConfig()
        self._scheme = self._config.digest_scheme()
        self.mode = ShellMode.DEFAULT
        self.builder: IncrementalBuilder | None = None
        self.tree: GrowableTree | None = None

    def _print(self, text: str) -> None:
        print(text, file=self._stdout)

    def run(self) -> None:
        """Read and execute commands until quit or end of input."""
        running = True
        while running:
            self._stdout.write(PROMPTS[self.mode])
            self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                break
            running = self.execute(line)

    def execute(self, line: str) -> bool:
        """
        Execute a single command line.

        Returns:
            False if the shell should stop, True otherwise
        """
        tokens = line.split()
        try:
            command = identify_command(tokens)
        except WrongParameters:
            self._print(WRONG_PARAMETER_MESSAGE)
            return True

        if command is None or not command.available_in(self.mode):
            self._print(COMMAND_DOESNT_EXIST_MESSAGE)
            return True

        logger.debug("Executing %s in mode %s", command.command, self.mode.name)
        if command is ShellCommand.QUIT:
            return False
        handler = getattr(self, f"_cmd_{command.name.lower()}")
        handler(tokens)
        return True

    # -------------------------------------------------------------------------
    # Input validation
    # -------------------------------------------------------------------------

    def _parse_non_negative(self, token: str) -> int | None:
        try:
            number = parse_integer(token)
        except ValueError:
            self._print("Error! Invalid input. That was no number.")
            return None
        if number < 0:
            self._print(NO_VALID_INPUT_MESSAGE + "Negative numbers are not allowed.")
            return None
        return number

    def _parse_digest(self, token: str) -> int | None:
        try:
            digest = parse_integer(token)
        except ValueError:
            self._print("Error! Invalid input. That was no number.")
            return None
        if not INT64_MIN <= digest <= INT64_MAX:
            self._print(NO_VALID_INPUT_MESSAGE + "The hash does not fit into 64 bits.")
            return None
        return digest

    def _parse_capacity(self, token: str) -> int | None:
        capacity = self._parse_non_negative(token)
        if capacity is None:
            return None
        minimum = self._config.tree.min_capacity
        if capacity < minimum:
            self._print(f"Error! Minimum size is {minimum}.")
            self._reset()
            return None
        return capacity

    def _parse_body(self, text: str) -> Body | None:
        try:
            return parse_body(text)
        except BodyParseException as e:
            self._print(f"Error! {e.message}")
            return None

    def _reset(self) -> None:
        self.mode = ShellMode.DEFAULT
        self.builder = None
        self.tree = None

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _cmd_new(self, tokens: list[str]) -> None:
        capacity = self._parse_capacity(tokens[1])
        if capacity is None:
            return
        self._reset()
        self.builder = IncrementalBuilder(capacity, self._scheme)
        self.mode = ShellMode.BUILD

    def _cmd_new_check(self, tokens: list[str]) -> None:
        capacity = self._parse_capacity(tokens[1])
        if capacity is None:
            return
        root_digest = self._parse_digest(tokens[2])
        if root_digest is None:
            return
        self._reset()
        self.tree = GrowableTree(capacity, self._scheme)
        self.tree.set_digest(0, root_digest)
        self.mode = ShellMode.CHECK

    def _cmd_push(self, tokens: list[str]) -> None:
        body = self._parse_body(tokens[1])
        if body is not None:
            self.builder.push(body)

    def _cmd_set_val(self, tokens: list[str]) -> None:
        body = self._parse_body(tokens[2])
        if body is None:
            return
        index = self._parse_non_negative(tokens[1])
        if index is None:
            return
        try:
            self.tree.set_value(index, body)
        except IndexOutOfRangeException:
            self._print(f"{NO_VALID_INDEX_MESSAGE}{tokens[1]}.")

    def _cmd_set_hash(self, tokens: list[str]) -> None:
        index = self._parse_non_negative(tokens[1])
        if index is None:
            return
        if index == 0:
            self._print("Error! Root hash cannot be changed.")
            return
        digest = self._parse_digest(tokens[2])
        if digest is None:
            return
        try:
            self.tree.set_digest(index, digest)
        except IndexOutOfRangeException:
            self._print(f"{NO_VALID_INDEX_MESSAGE}{tokens[1]}.")
        except ValueConflictException:
            self._print("Error! This node has a value, thus the hash cannot be changed.")

    def _cmd_ready(self, tokens: list[str]) -> None:
        missing = self.tree.get_missing()
        if not missing:
            self._print("READY!")
        else:
            self._print(format_indices(missing))

    def _cmd_check(self, tokens: list[str]) -> None:
        if self.tree.get_missing():
            self._print("Error! Check is currently not available.")
        elif self.tree.is_consistent():
            self._print("ACK")
        else:
            self._print("REJ")

    def _cmd_clear(self, tokens: list[str]) -> None:
        if self.mode == ShellMode.BUILD:
            self.builder.clear()
        else:
            self.tree.clear()

    def _cmd_debug(self, tokens: list[str]) -> None:
        if self.mode == ShellMode.BUILD:
            self._print(str(self.builder.build()))
        else:
            self._print(str(self.tree))

    def _cmd_help(self, tokens: list[str]) -> None:
        self._print("All possible commands in current mode:\n")
        for command in ShellCommand:
            if command.available_in(self.mode):
                self._print(command.help_text + "\n")


def format_indices(indices: list[int]) -> str:
    """Format indices as a list without whitespace, e.g. ``[3,4,5]``."""
    return "[" + ",".join(str(i) for i in indices) + "]"


__all__ = [
    "Shell",
    "ShellCommand",
    "ShellMode",
    "PROMPTS",
    "format_indices",
    "identify_command",
]
