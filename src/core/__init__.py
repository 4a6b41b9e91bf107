from .codec8 import decode_codec8_frame, read_codec8_frame
from .cursor import ByteCursor, read_counted
from .errors import (
    BufferOverflow,
    ChecksumMismatch,
    Codec8Error,
    DecodeError,
    IntegrityError,
    InvalidImei,
    InvalidPreamble,
    RecordCountMismatch,
    Truncated,
    UnsupportedCodec,
)
from .imei import decode_imei
from .models import (
    AvlRecord,
    Codec8Frame,
    DecodedFrame,
    GpsFix,
    ImeiPreamble,
    IoElementSet,
    IoElementValue,
    IoWidth,
)
from .parser import StreamParser
from .processor import RecordProcessor, TelemetryMessage

__all__ = [
    "decode_codec8_frame", "read_codec8_frame", "decode_imei", "ByteCursor", "read_counted",
    "Codec8Error", "DecodeError", "Truncated", "InvalidPreamble", "UnsupportedCodec",
    "InvalidImei", "IntegrityError", "ChecksumMismatch", "RecordCountMismatch",
    "BufferOverflow", "AvlRecord", "Codec8Frame", "DecodedFrame", "GpsFix",
    "ImeiPreamble", "IoElementSet", "IoElementValue", "IoWidth",
    "StreamParser", "RecordProcessor", "TelemetryMessage",
]
