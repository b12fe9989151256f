"""Tests for the process runner"""

import sys
import time

import pytest
from k3dmanager.installer.runner import (
    CommandFailed,
    CommandInvocation,
    SpawnFailed,
    run_command,
)


def python(code):
    return CommandInvocation(sys.executable, ("-c", code))


class TestCommandInvocation:
    def test_argv(self):
        inv = CommandInvocation("kubectl", ["get", "nodes"])
        assert inv.argv == ["kubectl", "get", "nodes"]
        assert inv.args == ("get", "nodes")

    def test_str_quotes_arguments(self):
        inv = CommandInvocation("kubectl", ("patch", "svc", "-p", '{"a": 1}'))
        assert str(inv) == "kubectl patch svc -p '{\"a\": 1}'"

    def test_rejects_empty_executable(self):
        with pytest.raises(ValueError):
            CommandInvocation("", ("get",))

    def test_rejects_empty_argument(self):
        with pytest.raises(ValueError):
            CommandInvocation("k3d", ("cluster", "", "create"))


class TestRunCommand:
    def test_success_returns_outcome(self):
        outcome = run_command(python("print('hello')"), forward=False)
        assert outcome.ok
        assert outcome.returncode == 0
        assert outcome.stdout == "hello\n"

    @pytest.mark.parametrize("code", [1, 2, 42])
    def test_nonzero_exit_raises_command_failed(self, code):
        inv = python(f"import sys; sys.exit({code})")
        with pytest.raises(CommandFailed) as excinfo:
            run_command(inv, forward=False)
        assert excinfo.value.returncode == code
        assert excinfo.value.executable == sys.executable
        assert excinfo.value.arguments == inv.args

    def test_command_failed_keeps_stderr(self):
        inv = python("import sys; sys.stderr.write('boom'); sys.exit(3)")
        with pytest.raises(CommandFailed) as excinfo:
            run_command(inv, forward=False)
        assert excinfo.value.stderr == "boom"

    def test_missing_executable_raises_spawn_failed(self):
        inv = CommandInvocation("k3dm-no-such-tool-xyz", ("cluster", "list"))
        with pytest.raises(SpawnFailed) as excinfo:
            run_command(inv)
        assert not isinstance(excinfo.value, CommandFailed)
        assert excinfo.value.executable == "k3dm-no-such-tool-xyz"
        assert isinstance(excinfo.value.cause, OSError)

    def test_spawn_failed_includes_install_hint(self, monkeypatch):
        monkeypatch.setenv("PATH", "")
        with pytest.raises(SpawnFailed) as excinfo:
            run_command(CommandInvocation("k3d", ("version",)))
        assert "install.sh" in str(excinfo.value)

    def test_forwards_output_verbatim(self, capsys):
        run_command(python("import sys; sys.stdout.write('node-a Ready\\nnode-b Ready'); sys.stderr.write('warn')"))
        captured = capsys.readouterr()
        assert captured.out == "node-a Ready\nnode-b Ready"
        assert captured.err == "warn"

    def test_forwards_output_before_failing(self, capsys):
        with pytest.raises(CommandFailed):
            run_command(python("import sys; print('partial'); sys.exit(1)"))
        assert "partial" in capsys.readouterr().out

    def test_no_forwarding(self, capsys):
        run_command(python("print('quiet')"), forward=False)
        assert capsys.readouterr().out == ""

    def test_output_streams_while_child_runs(self, monkeypatch):
        from k3dmanager.installer import runner as runner_module

        arrivals = []
        monkeypatch.setattr(
            runner_module.click, "echo", lambda text, nl=True, err=False: arrivals.append((time.monotonic(), text))
        )

        code = "import sys, time; print('step1', flush=True); time.sleep(2); print('step2')"
        start = time.monotonic()
        outcome = run_command(python(code))
        finished = time.monotonic() - start

        assert [text for _, text in arrivals] == ["step1\n", "step2\n"]
        assert arrivals[0][0] - start < 1.5
        assert finished >= 2
        assert outcome.stdout == "step1\nstep2\n"
