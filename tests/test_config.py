"""Tests for engine configuration."""

import os
import sys

import pytest

from chess_eval.config import EngineConfig, find_stockfish


class TestEngineConfig:
    """Test EngineConfig validation and resolution."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.engine_path is None
        assert config.threads is None
        assert config.write_interval == 0.01
        assert config.ready_timeout == 10.0

    @pytest.mark.parametrize("kwargs", [
        {"threads": 0},
        {"threads": -2},
        {"write_interval": 0},
        {"ready_timeout": 0},
        {"ready_timeout": -1.0},
        {"shutdown_timeout": -0.5},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_unbounded_ready_timeout(self):
        assert EngineConfig(ready_timeout=None).ready_timeout is None

    def test_resolve_threads(self, monkeypatch):
        monkeypatch.setattr(os, "cpu_count", lambda: 12)

        assert EngineConfig().resolve_threads() is None
        assert EngineConfig(threads=3).resolve_threads() == 3
        assert EngineConfig(threads=3, auto_threads=True).resolve_threads() == 3
        assert EngineConfig(auto_threads=True).resolve_threads() == 12

    def test_resolve_explicit_path(self):
        assert EngineConfig(engine_path=sys.executable).resolve_engine_path() == sys.executable

    def test_resolve_missing_path(self, tmp_path):
        config = EngineConfig(engine_path=str(tmp_path / "stockfish"))
        with pytest.raises(FileNotFoundError):
            config.resolve_engine_path()

    def test_find_stockfish_missing(self, monkeypatch):
        monkeypatch.setattr("shutil.which", lambda name: None)
        with pytest.raises(FileNotFoundError):
            find_stockfish()

    def test_find_stockfish_first_match(self, monkeypatch):
        monkeypatch.setattr(
            "shutil.which",
            lambda name: "/opt/sf/stockfish" if name == "stockfish" else None,
        )
        assert find_stockfish() == "/opt/sf/stockfish"
