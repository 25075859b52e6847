"""Shared fixtures for supervisor and service tests."""

import sys
import time
from collections import deque
from pathlib import Path

import pytest

from chess_eval.config import EngineConfig
from chess_eval.engine.supervisor import EngineSupervisor
from chess_eval.errors import EngineCrashedError

FAKE_ENGINE = Path(__file__).parent / "fixtures" / "fake_engine.py"


class FakeBridge:
    """
    In-memory stand-in for ProcessBridge.

    Records every line sent and answers ``isready`` with ``readyok`` (queued
    behind any output already pushed) unless ``answer_ready`` is False.
    """

    def __init__(self, answer_ready=True):
        self.answer_ready = answer_ready
        self.sent = []
        self.inbound = deque()
        self.crashed = False
        self.closed = False

    def push(self, *lines):
        self.inbound.extend(lines)

    def crash(self):
        self.crashed = True

    def send(self, line):
        if self.crashed:
            raise EngineCrashedError("fake engine crashed")
        self.sent.append(line)
        if line == "isready" and self.answer_ready:
            self.inbound.append("readyok")

    def try_receive_one(self):
        if self.inbound:
            return self.inbound.popleft()
        if self.crashed:
            raise EngineCrashedError("fake engine crashed")
        return None

    def receive(self, timeout=None):
        line = self.try_receive_one()
        if line is None and timeout is not None:
            time.sleep(min(timeout, 0.01))
        return line

    def drain_available(self):
        lines = []
        while True:
            line = self.try_receive_one()
            if line is None:
                return lines
            lines.append(line)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_bridge():
    return FakeBridge()


@pytest.fixture
def supervisor(fake_bridge):
    """Supervisor wired to a FakeBridge, with a short ready timeout."""
    config = EngineConfig(ready_timeout=0.2)
    return EngineSupervisor(config, bridge_factory=lambda: fake_bridge)


@pytest.fixture
def fake_engine_command():
    """Argument vector launching the scripted fake UCI engine."""
    return [sys.executable, str(FAKE_ENGINE)]
