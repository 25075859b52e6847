"""
Engine configuration for the evaluation supervisor.
"""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


STOCKFISH_CANDIDATES = [
    "stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
    "/opt/homebrew/bin/stockfish",
]


def find_stockfish() -> str:
    """
    Auto-detect Stockfish binary location.

    Returns:
        Path to Stockfish binary

    Raises:
        FileNotFoundError: If Stockfish not found
    """
    for candidate in STOCKFISH_CANDIDATES:
        path = shutil.which(candidate)
        if path:
            return path

    raise FileNotFoundError(
        "Stockfish not found. Install with: brew install stockfish (macOS) "
        "or apt install stockfish (Linux)"
    )


@dataclass
class EngineConfig:
    """Configuration for the engine process and its supervisor.

    Only ``engine_path`` touches the filesystem, and only when a process is
    actually spawned.
    """

    engine_path: Optional[str] = None
    """Path to the UCI engine binary (None = auto-detect Stockfish)"""

    threads: Optional[int] = None
    """Search threads sent via setoption after spawning (None = engine default)"""

    auto_threads: bool = False
    """Use one search thread per CPU core when ``threads`` is unset"""

    write_interval: float = 0.01
    """Seconds the writer worker waits on its outbound queue between polls"""

    ready_timeout: Optional[float] = 10.0
    """Seconds to wait for readyok after isready (None = wait forever)"""

    shutdown_timeout: float = 1.0
    """Seconds to wait for the process to exit after quit before killing it"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.threads is not None and self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")

        if self.write_interval <= 0:
            raise ValueError(
                f"write_interval must be positive, got {self.write_interval}"
            )

        if self.ready_timeout is not None and self.ready_timeout <= 0:
            raise ValueError(
                f"ready_timeout must be positive or None, got {self.ready_timeout}"
            )

        if self.shutdown_timeout < 0:
            raise ValueError(
                f"shutdown_timeout must be non-negative, got {self.shutdown_timeout}"
            )

    def resolve_engine_path(self) -> str:
        """
        Return the engine binary to launch.

        Raises:
            FileNotFoundError: If the configured path does not exist or no
                Stockfish binary can be found
        """
        if self.engine_path is None:
            return find_stockfish()

        resolved = shutil.which(self.engine_path) or self.engine_path
        if not Path(resolved).exists():
            raise FileNotFoundError(
                f"Engine binary not found at: {self.engine_path}\n"
                "Install with: brew install stockfish (macOS) or apt install stockfish (Linux)"
            )
        return resolved

    def resolve_threads(self) -> Optional[int]:
        """Thread count to configure on spawn, or None to keep the engine default."""
        if self.threads is not None:
            return self.threads
        if self.auto_threads:
            return os.cpu_count() or 1
        return None
