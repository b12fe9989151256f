"""Shared test fixtures"""

import pytest
from k3dmanager.installer.runner import CommandFailed, CommandInvocation, CommandOutcome


class FakeRunner:
    """Records invocations and answers with canned exit codes and output"""

    def __init__(self):
        self.calls = []
        self.results = {}

    def set_result(self, executable, returncode=0, stdout="", stderr=""):
        self.results[executable] = (returncode, stdout, stderr)

    def __call__(self, invocation: CommandInvocation) -> CommandOutcome:
        self.calls.append(invocation)
        returncode, stdout, stderr = self.results.get(invocation.executable, (0, "", ""))
        if returncode != 0:
            raise CommandFailed(invocation, returncode, stderr=stderr)
        if stdout:
            print(stdout, end="")
        return CommandOutcome(invocation, returncode, stdout, stderr)


class FakeSleep:
    """Records requested delays without sleeping"""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def fake_sleep():
    return FakeSleep()
