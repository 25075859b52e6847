"""
Engine Process Bridge

Owns the engine subprocess and its pipes, and turns them into a
non-blocking, line-oriented interface.

Threading:
    - Reader thread: blocks on the engine's stdout, queues every line
    - Writer thread: waits on the outbound queue, writes lines to stdin
    - Caller thread: only ever touches the two queues

Failure handling:
    Neither worker dies silently. EOF on stdout, or an OSError on either
    pipe, records the reason and queues a sentinel behind any lines already
    read. Receiving the sentinel raises EngineCrashedError, and so does every
    later receive or send.
"""

import logging
import queue
import subprocess
import threading
from typing import List, Optional, Sequence, Union

from chess_eval.errors import EngineCrashedError

logger = logging.getLogger(__name__)


class _EngineExited:
    """Queue marker pushed when the engine can no longer be read from."""

    def __repr__(self) -> str:
        return "<engine exited>"


ENGINE_EXITED = _EngineExited()


class ProcessBridge:
    """
    Line-oriented bridge to a UCI engine subprocess.

    Attributes:
        command: Argument vector used to launch the engine
        write_interval: Seconds the writer waits for outbound lines per poll
        process: The running subprocess
    """

    def __init__(
        self,
        command: Union[str, Sequence[str]],
        write_interval: float = 0.01,
        shutdown_timeout: float = 1.0,
    ):
        """
        Launch the engine and start the reader and writer threads.

        Args:
            command: Engine binary path, or full argument vector
            write_interval: Writer polling interval in seconds
            shutdown_timeout: Seconds to wait for exit in close()

        Raises:
            OSError: If the engine cannot be launched
        """
        self.command = [command] if isinstance(command, str) else list(command)
        self.write_interval = write_interval
        self.shutdown_timeout = shutdown_timeout

        self._inbound: "queue.Queue[object]" = queue.Queue()
        self._outbound: "queue.Queue[str]" = queue.Queue()
        self._failure: Optional[str] = None
        self._failure_lock = threading.Lock()
        self._closing = threading.Event()

        self.process = subprocess.Popen(
            self.command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
        logger.info(f"Started engine process {self.command[0]} (pid={self.process.pid})")

        self._reader = threading.Thread(
            target=self._read_loop, name="engine-reader", daemon=True
        )
        self._writer = threading.Thread(
            target=self._write_loop, name="engine-writer", daemon=True
        )
        self._reader.start()
        self._writer.start()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def failure(self) -> Optional[str]:
        """Reason the bridge stopped working, or None while healthy."""
        return self._failure

    @property
    def is_alive(self) -> bool:
        return self._failure is None and not self._closing.is_set()

    def send(self, line: str):
        """
        Queue a line for the engine. Never blocks.

        Raises:
            EngineCrashedError: If the bridge has already failed
        """
        if self._failure is not None:
            raise EngineCrashedError(self._failure)
        self._outbound.put(line)

    def try_receive_one(self) -> Optional[str]:
        """
        Return the next line from the engine if one is buffered, else None.

        Raises:
            EngineCrashedError: If the engine exited and all its output has
                been consumed
        """
        try:
            item = self._inbound.get_nowait()
        except queue.Empty:
            return None
        return self._unwrap(item)

    def receive(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Wait for the next line from the engine.

        Args:
            timeout: Seconds to wait (None = wait forever)

        Returns:
            The line, or None if the timeout expired

        Raises:
            EngineCrashedError: If the engine exited
        """
        try:
            item = self._inbound.get(timeout=timeout)
        except queue.Empty:
            return None
        return self._unwrap(item)

    def drain_available(self) -> List[str]:
        """Return every buffered line, in the order the engine wrote them."""
        lines = []
        while True:
            line = self.try_receive_one()
            if line is None:
                return lines
            lines.append(line)

    def close(self):
        """Ask the engine to quit, then make sure the process is gone."""
        if self._closing.is_set():
            return
        self._closing.set()

        if self.process.poll() is None:
            try:
                self.process.stdin.write("quit\n")
                self.process.stdin.flush()
            except (OSError, ValueError):
                pass

            try:
                self.process.wait(timeout=self.shutdown_timeout)
            except subprocess.TimeoutExpired:
                logger.warning("Engine did not exit after quit, killing it")
                self.process.kill()
                self.process.wait()

        # the reader sees EOF once the process is gone
        self._writer.join(timeout=1.0)
        self._reader.join(timeout=1.0)

        for stream in (self.process.stdin, self.process.stdout):
            try:
                stream.close()
            except (OSError, ValueError):
                pass

        logger.info(f"Engine process exited (returncode={self.process.returncode})")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _unwrap(self, item: object) -> str:
        if item is ENGINE_EXITED:
            # keep the marker queued so every later receive fails too
            self._inbound.put(ENGINE_EXITED)
            raise EngineCrashedError(self._failure or "engine exited")
        return item

    def _fail(self, reason: str):
        with self._failure_lock:
            if self._failure is not None:
                return
            self._failure = reason

        if self._closing.is_set():
            logger.debug(f"Engine bridge stopped during shutdown: {reason}")
        else:
            logger.error(f"Engine bridge failed: {reason}")
        self._inbound.put(ENGINE_EXITED)

    def _read_loop(self):
        try:
            for line in self.process.stdout:
                line = line.strip()
                logger.debug(f"<<< {line}")
                self._inbound.put(line)
        except (OSError, ValueError) as e:
            self._fail(f"error reading engine output: {e}")
            return

        returncode = self.process.poll()
        self._fail(f"engine output closed (returncode={returncode})")

    def _write_loop(self):
        while not self._closing.is_set():
            try:
                line = self._outbound.get(timeout=self.write_interval)
            except queue.Empty:
                continue

            try:
                self.process.stdin.write(line + "\n")
                self.process.stdin.flush()
            except (OSError, ValueError) as e:
                self._fail(f"error writing to engine: {e}")
                return

            logger.debug(f">>> {line}")
