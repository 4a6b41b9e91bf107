import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from core.codec8 import decode_codec8_frame  # noqa: E402

FRAME = bytes.fromhex(
    "00000000000000A7080400000113fc208dff000f14f650209cca80006f00d60400040004030101"
    "150316030001460000015d0000000113fc17610b000f14ffe0209cc580006e00c0050001000403"
    "0101150316010001460000015e0000000113fc284945000f150f00209cd2000095010804000000"
    "04030101150016030001460000015d0000000113fc267c5b000f150a50209cccc0009300680400"
    "000004030101150016030001460000015b00040000BA48"
)


def benchmark_decoder(num_frames: int = 10000) -> None:
    """Benchmark Codec 8 frame decoding throughput"""
    start_time = time.time()

    for _ in range(num_frames):
        decode_codec8_frame(FRAME)

    duration = time.time() - start_time
    rate = num_frames / duration

    print(f"Codec 8 decoder benchmark:")
    print(f"  Frames: {num_frames} ({num_frames * 4} records)")
    print(f"  Duration: {duration:.2f}s")
    print(f"  Rate: {rate:.0f} frames/s")


if __name__ == "__main__":
    benchmark_decoder()
