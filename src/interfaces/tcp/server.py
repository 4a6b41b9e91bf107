from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable

import structlog

from config import DecoderConfig, IntakeConfig
from core.errors import Codec8Error
from core.models import DecodedFrame
from core.parser import StreamParser
from utils.metrics import DECODE_ERRORS, DECODE_TIME, FRAMES

logger = structlog.get_logger(__name__)

FrameHandler = Callable[[str, DecodedFrame], Awaitable[None]]


class TCPIntakeServer:
    """Приём потоков от трекеров: IMEI, затем кадры Codec 8.

    Пассивный приёмник: подтверждения устройству не отправляются.
    """

    def __init__(self, config: IntakeConfig, decoder: DecoderConfig, on_frame: FrameHandler):
        self.config = config
        self.decoder = decoder
        self.on_frame = on_frame
        self._server: asyncio.AbstractServer | None = None
        self.connections = 0

    @property
    def port(self) -> int | None:
        if not self._server or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    def create_parser(self) -> StreamParser:
        return StreamParser(
            max_buffer_size=self.config.max_buffer_size,
            drop_on_checksum_mismatch=self.decoder.drop_on_checksum_mismatch,
            drop_on_record_count_mismatch=self.decoder.drop_on_record_count_mismatch,
        )

    async def start(self) -> None:
        self._server = await asyncio.start_server(
            self._handle_connection, self.config.host, self.config.port
        )
        logger.info("intake_server_started", host=self.config.host, port=self.port)

    async def serve(self) -> None:
        if not self._server:
            return
        try:
            await self._server.serve_forever()
        except asyncio.CancelledError:
            # serve_forever отменяется при stop()
            if self._server.is_serving():
                raise

    async def stop(self) -> None:
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            logger.info("intake_server_stopped")

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        peer = writer.get_extra_info("peername")
        log = logger.bind(peer=str(peer))
        parser = self.create_parser()
        self.connections += 1
        log.info("connection_opened")

        try:
            while True:
                chunk = await asyncio.wait_for(
                    reader.read(self.config.read_size), timeout=self.config.idle_timeout_s
                )
                if not chunk:
                    break
                await self.process_chunk(parser, chunk)
        except asyncio.TimeoutError:
            log.info("connection_idle_timeout", imei=parser.imei)
        except Codec8Error as e:
            DECODE_ERRORS.labels(error=type(e).__name__).inc()
            log.warning("stream_decode_failed", imei=parser.imei,
                        error_type=type(e).__name__, error=str(e))
        except ConnectionError as e:
            log.info("connection_lost", imei=parser.imei, error=str(e))
        finally:
            log.info("connection_closed", imei=parser.imei,
                     pending=parser.pending, **parser.stats)
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

    async def process_chunk(self, parser: StreamParser, chunk: bytes) -> int:
        """Разбор очередного куска потока, возвращает число принятых кадров"""
        dropped = parser.stats["dropped"]
        started = time.perf_counter()
        frames = parser.feed(chunk)
        DECODE_TIME.observe(time.perf_counter() - started)

        for _ in range(parser.stats["dropped"] - dropped):
            FRAMES.labels(status="dropped").inc()
        for decoded in frames:
            FRAMES.labels(status="accepted").inc()
            await self.on_frame(parser.imei, decoded)

        if parser.error is not None:
            raise parser.error
        return len(frames)
