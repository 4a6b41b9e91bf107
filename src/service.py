from __future__ import annotations

import sys
from typing import BinaryIO

import orjson
import structlog

from config import Settings
from core.models import DecodedFrame
from core.processor import RecordProcessor, TelemetryMessage
from interfaces.tcp.server import TCPIntakeServer
from utils.metrics import RECORDS, MetricsServer

logger = structlog.get_logger(__name__)


class Codec8Service:
    def __init__(self, settings: Settings, output: BinaryIO | None = None) -> None:
        self.settings = settings
        self.processor = RecordProcessor()

        self.intake_server = TCPIntakeServer(settings.intake, settings.decoder, self.handle_frame)

        self.metrics_server: MetricsServer | None = None
        self.running = False
        self.stats: dict[str, int] = {"frames": 0, "records": 0, "errors": 0, "published": 0}

        self._output = output
        self._owns_output = False

    def _open_output(self) -> BinaryIO:
        if self._output is None:
            if self.settings.output.path is not None:
                self.settings.output.path.parent.mkdir(parents=True, exist_ok=True)
                self._output = open(self.settings.output.path, "ab")
                self._owns_output = True
            else:
                self._output = sys.stdout.buffer
        return self._output

    async def start(self) -> None:
        logger.info("service_starting")

        self._open_output()

        if self.settings.metrics.enabled:
            self.metrics_server = MetricsServer(self.settings.metrics)
            await self.metrics_server.start()

        await self.intake_server.start()

        logger.info("service_started", port=self.intake_server.port)
        self.running = True

        await self.intake_server.serve()

    async def handle_frame(self, imei: str, decoded: DecodedFrame) -> None:
        self.stats["frames"] += 1
        try:
            messages = self.processor.process(imei, decoded)
            self.stats["records"] += len(messages)
            RECORDS.inc(len(messages))

            for message in messages:
                if self.publish_message(message):
                    self.stats["published"] += 1
        except Exception as e:
            self.stats["errors"] += 1
            logger.error("process_error", imei=imei, error=str(e))

        if self.stats["frames"] % 1000 == 0:
            logger.info("stats", **self.stats)

    def publish_message(self, message: TelemetryMessage) -> bool:
        try:
            output = self._open_output()
            output.write(orjson.dumps(message.model_dump()) + b"\n")
            output.flush()
            return True
        except OSError as e:
            logger.error("publish_failed", imei=message.imei, error=str(e))
            return False

    async def shutdown(self) -> None:
        logger.info("service_shutting_down")
        self.running = False

        await self.intake_server.stop()

        if self.metrics_server:
            await self.metrics_server.stop()

        if self._owns_output and self._output is not None:
            self._output.close()
            self._output = None
            self._owns_output = False

        logger.info("service_stopped", final_stats=self.stats)
