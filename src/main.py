from __future__ import annotations

import asyncio
import signal
import sys

import orjson
import uvloop

from config import get_settings
from core.codec8 import decode_codec8_frame
from core.errors import Codec8Error
from core.imei import IMEI_PREFIX, decode_imei
from service import Codec8Service
from utils.logging import setup_logging


async def main() -> None:
    settings = get_settings()
    logger = setup_logging(settings.logging.level, settings.logging.format)

    service = Codec8Service(settings)

    def signal_handler() -> None:
        logger.info("shutdown_signal_received")
        asyncio.create_task(service.shutdown())

    for sig in [signal.SIGINT, signal.SIGTERM]:
        asyncio.get_event_loop().add_signal_handler(sig, signal_handler)

    try:
        await service.start()
    except Exception as e:
        logger.error("service_error", error=str(e))
        raise


def decode_hex(captures: list[str]) -> int:
    """Декодирование hex-дампов (IMEI или кадр Codec 8), JSON построчно в stdout"""
    settings = get_settings()
    logger = setup_logging(settings.logging.level, "console")
    status = 0

    for capture in captures:
        try:
            data = bytes.fromhex(capture)
        except ValueError as e:
            logger.error("invalid_hex", error=str(e))
            status = 1
            continue

        try:
            if data.startswith(IMEI_PREFIX):
                result = decode_imei(data).model_dump(mode="json", exclude={"remainder"})
            else:
                decoded = decode_codec8_frame(data)
                result = decoded.model_dump(mode="json", exclude={"remainder"})
                result["checksum_valid"] = decoded.checksum_valid
                result["record_count_valid"] = decoded.record_count_valid
        except Codec8Error as e:
            logger.error("decode_failed", error_type=type(e).__name__, error=str(e))
            status = 1
            continue

        sys.stdout.buffer.write(orjson.dumps(result, option=orjson.OPT_INDENT_2) + b"\n")
    sys.stdout.buffer.flush()
    return status


if __name__ == "__main__":
    uvloop.install()
    asyncio.run(main())
