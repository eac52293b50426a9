"""
Adapter process wrapper.

Spawns the CEC adapter process, decodes its output into events and writes
commands to its input.
"""

import asyncio
import signal
import logging
from typing import Optional, List, Dict, Any

from .buffer import LineFramer
from ..parser.bus import EventBus
from ..parser.events import StopEvent
from ..parser.parser import CecTrafficParser

logger = logging.getLogger(__name__)


class CecClientError(RuntimeError):
    """Raised when the adapter process is misused or cannot be started."""


def encode_command(*command: int) -> str:
    """
    Encode bytes as an adapter transmit command.

    ``encode_command(0x10, 0x82, 0x10, 0x00)`` gives ``"tx 10:82:10:00"``.
    """
    for byte in command:
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte out of range: {byte}")
    return "tx " + ":".join(f"{byte:02x}" for byte in command)


class CecClient:
    """
    Runs the adapter process and broadcasts decoded events on its bus.

    Features:
    - Output framing and decoding through CecTrafficParser
    - Optional OSD name passed to the adapter with ``-o``
    - Raw and hex-encoded command writing
    """

    def __init__(
        self,
        osd_name: Optional[str] = None,
        bus: Optional[EventBus] = None,
        evaluate_all_handlers: bool = False,
        chunk_size: int = 4096,
    ):
        """
        Initialize the adapter client.

        Args:
            osd_name: OSD name the adapter announces on the bus
            bus: Event bus to broadcast on
            evaluate_all_handlers: Evaluate every line handler, not only the first
            chunk_size: Bytes requested per read from the adapter output
        """
        self.osd_name = osd_name
        self.parser = CecTrafficParser(bus=bus, evaluate_all_handlers=evaluate_all_handlers)
        self.bus = self.parser.bus
        self.chunk_size = chunk_size

        self.client_name: Optional[str] = None
        self.params: List[str] = []
        self.process: Optional[asyncio.subprocess.Process] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self.process is not None and self.process.returncode is None

    async def start(self, client_name: str = "cec-client", *params: str):
        """
        Spawn the adapter and start decoding its output.

        Args:
            client_name: Adapter executable
            params: Extra command-line arguments
        """
        if self.running:
            raise CecClientError("Adapter process already running")

        self.client_name = client_name
        self.params = list(params)
        if self.osd_name is not None:
            self.params.extend(["-o", self.osd_name])

        try:
            self.process = await asyncio.create_subprocess_exec(
                self.client_name,
                *self.params,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise CecClientError(f"Adapter executable not found: {self.client_name}") from e

        self._stopped = False
        logger.info(f"Started {self.client_name} {' '.join(self.params)}".rstrip())
        self._reader_task = asyncio.create_task(self._read_output())

    async def _read_output(self):
        """Frame adapter output into lines until end of stream."""
        framer = LineFramer(on_line=self.parser.process_line)
        stdout = self.process.stdout

        try:
            while True:
                chunk = await stdout.read(self.chunk_size)
                if not chunk:
                    break
                framer.feed(chunk)

            framer.close()
            logger.info("Adapter output closed")
        finally:
            self._on_close()

    def _on_close(self):
        if not self._stopped:
            self._stopped = True
            self.bus.emit(StopEvent())

    async def stop(self):
        """Interrupt the adapter and wait for its output to drain."""
        if self.process is None:
            raise CecClientError("Adapter process not started")

        self._on_close()
        if self.process.returncode is None:
            try:
                self.process.send_signal(signal.SIGINT)
            except ProcessLookupError:
                logger.debug("Adapter already exited before SIGINT")

        if self._reader_task:
            await self._reader_task
        await self.process.wait()
        logger.info(f"Adapter exited with code {self.process.returncode}")

    async def wait(self):
        """Wait until the adapter output is exhausted."""
        if self._reader_task:
            await self._reader_task

    def send(self, message: str):
        """Write a raw command line to the adapter."""
        if self.process is None or self.process.stdin is None:
            raise CecClientError("Adapter process not started")

        logger.debug(f"Sending: {message}")
        self.process.stdin.write((message + "\n").encode("ascii"))

    def send_command(self, *command: int):
        """Transmit a frame given as byte values."""
        self.send(encode_command(*command))

    def get_stats(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "client": self.client_name,
            "params": self.params,
            "parser_stats": self.parser.get_stats(),
        }
