from __future__ import annotations

import os
import structlog
from config import MetricsConfig

logger = structlog.get_logger(__name__)

# Отключить метрики для тестов
METRICS_DISABLED = os.getenv('DISABLE_METRICS', '0') == '1'

if not METRICS_DISABLED:
    from prometheus_client import Counter, Histogram, start_http_server

    FRAMES = Counter("teltonika_frames_total", "Codec 8 frames by outcome", ["status"])
    RECORDS = Counter("teltonika_records_total", "Decoded AVL records")
    DECODE_ERRORS = Counter("teltonika_decode_errors_total", "Fatal decode errors", ["error"])
    DECODE_TIME = Histogram("teltonika_decode_duration_seconds", "Chunk decode time")
else:
    # Заглушки для тестов
    class MockMetric:
        def inc(self, *args, **kwargs): pass
        def observe(self, *args, **kwargs): pass
        def labels(self, *args, **kwargs): return self

    FRAMES = MockMetric()
    RECORDS = MockMetric()
    DECODE_ERRORS = MockMetric()
    DECODE_TIME = MockMetric()

    def start_http_server(*args, **kwargs): pass


class MetricsServer:
    def __init__(self, config: MetricsConfig) -> None:
        self.config = config

    async def start(self) -> None:
        if self.config.enabled and not METRICS_DISABLED:
            start_http_server(self.config.port)
            logger.info("metrics_server_started", port=self.config.port)

    async def stop(self) -> None:
        logger.info("metrics_server_stopped")
