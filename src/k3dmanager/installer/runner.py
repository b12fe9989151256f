"""Synchronous execution of external tools."""

import logging
import shlex
import subprocess
import threading
from dataclasses import dataclass
from typing import IO, List, Tuple

import click

logger = logging.getLogger(__name__)

TOOL_HINTS = {
    "k3d": "Install k3d: curl -s https://raw.githubusercontent.com/k3d-io/k3d/main/install.sh | bash",
    "kubectl": "Install kubectl from https://pkgs.k8s.io or: snap install kubectl --classic",
    "docker": "Install Docker: curl -fsSL https://get.docker.com | sh",
}


@dataclass(frozen=True)
class CommandInvocation:
    """One external process call: an executable and its ordered arguments."""

    executable: str
    args: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.executable:
            raise ValueError("executable must not be empty")
        # Accept any sequence but store a tuple so invocations stay hashable.
        object.__setattr__(self, "args", tuple(self.args))
        for arg in self.args:
            if not isinstance(arg, str):
                raise ValueError(f"argument {arg!r} is not a string")
            if arg == "":
                raise ValueError(f"empty argument in call to {self.executable}")

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]

    def __str__(self) -> str:
        return " ".join(shlex.quote(part) for part in self.argv)


@dataclass(frozen=True)
class CommandOutcome:
    """Result of running a CommandInvocation."""

    invocation: CommandInvocation
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandError(RuntimeError):
    """Base exception for external command errors"""

    def __init__(self, invocation: CommandInvocation, message: str):
        super().__init__(message)
        self.invocation = invocation

    @property
    def executable(self) -> str:
        return self.invocation.executable

    @property
    def arguments(self) -> Tuple[str, ...]:
        return self.invocation.args


class SpawnFailed(CommandError):
    """The executable could not be launched at all"""

    def __init__(self, invocation: CommandInvocation, cause: OSError):
        message = f"Could not run {invocation.executable}: {cause.strerror or cause}"
        hint = TOOL_HINTS.get(invocation.executable)
        if hint:
            message = f"{message}\n{hint}"
        super().__init__(invocation, message)
        self.cause = cause


class CommandFailed(CommandError):
    """The executable ran and exited with a non-zero status"""

    def __init__(self, invocation: CommandInvocation, returncode: int, stderr: str = ""):
        super().__init__(invocation, f"Command failed with code {returncode}: {invocation}")
        self.returncode = returncode
        self.stderr = stderr


def run_command(invocation: CommandInvocation, forward: bool = True) -> CommandOutcome:
    """Run a command to completion and return its outcome.

    The child's stdout and stderr are captured line by line and, when
    ``forward`` is set, echoed to our own streams as they arrive so long
    running tools show progress. A non-zero exit raises
    :class:`CommandFailed`; an executable that cannot be started raises
    :class:`SpawnFailed`.
    """
    logger.debug("Running: %s", invocation)

    try:
        proc = subprocess.Popen(
            invocation.argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
        )
    except OSError as e:
        raise SpawnFailed(invocation, e) from e

    stdout: List[str] = []
    stderr: List[str] = []

    with proc:
        # both pipes must drain while the child runs
        pump = threading.Thread(target=_pump, args=(proc.stderr, stderr, forward, True), daemon=True)
        pump.start()
        _pump(proc.stdout, stdout, forward, False)
        pump.join()
        returncode = proc.wait()

    logger.debug("%s exited with code %d", invocation.executable, returncode)

    if returncode != 0:
        raise CommandFailed(invocation, returncode, stderr="".join(stderr))

    return CommandOutcome(
        invocation=invocation,
        returncode=returncode,
        stdout="".join(stdout),
        stderr="".join(stderr),
    )


def _pump(stream: IO[str], chunks: List[str], forward: bool, err: bool) -> None:
    for line in stream:
        chunks.append(line)
        if forward:
            click.echo(line, nl=False, err=err)
