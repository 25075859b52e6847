"""
Tests for ProcessBridge against a real subprocess.

The engine is tests/fixtures/fake_engine.py, launched with the running
interpreter, so these tests need no chess engine installed.
"""

import time

import pytest

from chess_eval.engine.bridge import ProcessBridge
from chess_eval.errors import EngineCrashedError


def receive_until(bridge, expected, timeout=5.0):
    """Collect lines until ``expected`` arrives; fail the test on timeout."""
    lines = []
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        line = bridge.receive(timeout=0.05)
        if line is None:
            continue
        lines.append(line)
        if line == expected:
            return lines
    pytest.fail(f"Timed out waiting for {expected!r}, got {lines!r}")


@pytest.fixture
def bridge(fake_engine_command):
    bridge = ProcessBridge(fake_engine_command, write_interval=0.005)
    yield bridge
    bridge.close()


class TestProcessBridge:
    """Tests for the reader/writer threads and queues."""

    def test_try_receive_one_is_non_blocking(self, bridge):
        start = time.monotonic()
        assert bridge.try_receive_one() is None
        assert time.monotonic() - start < 0.5

    def test_ready_round_trip(self, bridge):
        bridge.send("isready")
        assert receive_until(bridge, "readyok") == ["readyok"]

    def test_lines_stripped_and_ordered(self, bridge):
        """Test that send order and receipt order are preserved."""
        for i in range(20):
            bridge.send(f"echo line {i}")
        bridge.send("isready")

        lines = receive_until(bridge, "readyok")

        assert lines == [f"line {i}" for i in range(20)] + ["readyok"]

    def test_drain_available(self, bridge):
        bridge.send("go")
        bridge.send("isready")
        receive_until(bridge, "info depth 1 seldepth 1 multipv 1 score cp 20 nodes 20 nps 20000 time 1 pv e2e4")

        # wait for the rest of the burst to be buffered
        time.sleep(0.3)
        lines = bridge.drain_available()

        assert lines[-1] == "readyok"
        assert lines[0].startswith("info depth 2")
        assert bridge.drain_available() == []

    def test_setoption_forwarded(self, bridge):
        bridge.send("setoption name Threads value 4")
        bridge.send("isready")

        lines = receive_until(bridge, "readyok")

        assert lines[0] == "info string setoption name Threads value 4"

    def test_crash_is_reported(self, bridge):
        """Test that engine exit surfaces as EngineCrashedError."""
        bridge.send("echo last words")
        bridge.send("crash")

        receive_until(bridge, "last words")

        with pytest.raises(EngineCrashedError):
            deadline = time.monotonic() + 5.0
            while time.monotonic() < deadline:
                bridge.receive(timeout=0.05)

        assert not bridge.is_alive
        assert "returncode" in bridge.failure

    def test_crash_is_sticky(self, bridge):
        bridge.send("crash")
        with pytest.raises(EngineCrashedError):
            bridge.receive(timeout=5.0)

        with pytest.raises(EngineCrashedError):
            bridge.try_receive_one()
        with pytest.raises(EngineCrashedError):
            bridge.drain_available()
        with pytest.raises(EngineCrashedError):
            bridge.send("isready")

    def test_close_stops_process(self, fake_engine_command):
        bridge = ProcessBridge(fake_engine_command)

        bridge.close()

        assert bridge.process.poll() == 0
        assert not bridge.is_alive
        bridge.close()

    def test_context_manager(self, fake_engine_command):
        with ProcessBridge(fake_engine_command) as bridge:
            bridge.send("isready")
            receive_until(bridge, "readyok")

        assert bridge.process.poll() is not None

    def test_missing_binary(self, tmp_path):
        with pytest.raises(OSError):
            ProcessBridge(str(tmp_path / "no-such-engine"))

    def test_invalid_utf8_line_is_delivered(self, bridge):
        """Test that undecodable output is replaced, not treated as a crash."""
        bridge.send("garbage")
        bridge.send("isready")

        lines = receive_until(bridge, "readyok")

        assert lines[0].startswith("info string caf")
        assert "\ufffd" in lines[0]
        assert bridge.is_alive
        assert bridge.failure is None

    def test_write_failure_is_reported(self, bridge):
        """Test that a broken stdin pipe surfaces as EngineCrashedError."""

        class BrokenPipe:
            def write(self, data):
                raise BrokenPipeError("stdin closed")

            def flush(self):
                raise BrokenPipeError("stdin closed")

            def close(self):
                pass

        engine_stdin = bridge.process.stdin
        bridge.process.stdin = BrokenPipe()

        bridge.send("isready")

        with pytest.raises(EngineCrashedError):
            bridge.receive(timeout=5.0)

        assert bridge.failure.startswith("error writing to engine")
        with pytest.raises(EngineCrashedError):
            bridge.send("isready")

        # let the engine see EOF so close() does not have to kill it
        engine_stdin.close()
