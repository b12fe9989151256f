"""Tests for the readiness verifier"""

import pytest
from k3dmanager.installer.runner import CommandFailed
from k3dmanager.installer.verify import (
    READINESS_DELAY,
    cluster_info,
    node_listing_invocation,
    verify_readiness,
)


class TestVerifyReadiness:
    def test_default_delay(self):
        assert READINESS_DELAY == 10.0

    def test_sleeps_then_lists_nodes(self, fake_runner, fake_sleep):
        verify_readiness(runner=fake_runner, sleep=fake_sleep)
        assert fake_sleep.delays == [READINESS_DELAY]
        assert [c.argv for c in fake_runner.calls] == [["kubectl", "get", "nodes", "-o", "wide"]]

    def test_delay_is_fixed(self, fake_runner, fake_sleep):
        verify_readiness(runner=fake_runner, delay=2.5, sleep=fake_sleep)
        verify_readiness(runner=fake_runner, delay=2.5, sleep=fake_sleep)
        assert fake_sleep.delays == [2.5, 2.5]

    def test_returns_raw_listing(self, fake_runner, fake_sleep):
        fake_runner.set_result("kubectl", stdout="node-a NotReady\n")
        outcome = verify_readiness(runner=fake_runner, sleep=fake_sleep)
        # listing is surfaced, not judged
        assert outcome.stdout == "node-a NotReady\n"

    def test_failure_propagates(self, fake_runner, fake_sleep):
        fake_runner.set_result("kubectl", returncode=1)
        with pytest.raises(CommandFailed):
            verify_readiness(runner=fake_runner, sleep=fake_sleep)
        assert len(fake_runner.calls) == 1

    def test_custom_client(self):
        assert node_listing_invocation("/usr/local/bin/kubectl").executable == "/usr/local/bin/kubectl"


class TestClusterInfo:
    def test_switches_context_first(self, fake_runner):
        cluster_info("dev", runner=fake_runner)
        argvs = [c.argv for c in fake_runner.calls]
        assert argvs[0] == ["kubectl", "config", "use-context", "k3d-dev"]
        assert ["kubectl", "get", "nodes", "-o", "wide"] in argvs
        assert ["kubectl", "get", "pods", "-A"] in argvs
        assert ["kubectl", "get", "svc", "-A"] in argvs

    def test_stops_on_failure(self, fake_runner):
        fake_runner.set_result("kubectl", returncode=1)
        with pytest.raises(CommandFailed):
            cluster_info("missing", runner=fake_runner)
        assert len(fake_runner.calls) == 1
