import pytest
from unittest.mock import patch

from core.errors import BufferOverflow, InvalidPreamble, UnsupportedCodec
from core.parser import StreamParser


class TestStreamParser:
    @pytest.fixture
    def parser(self):
        return StreamParser()

    def test_imei_then_frame(self, parser, imei_preamble, single_record_frame):
        frames = parser.feed(imei_preamble + single_record_frame)

        assert parser.imei == "356307042441013"
        assert len(frames) == 1
        assert frames[0].frame.records[0].timestamp == 1560161086000
        assert parser.pending == 0
        assert parser.stats == {"frames": 1, "records": 1, "dropped": 0}

    def test_byte_by_byte(self, parser, imei_preamble, four_records_frame):
        stream = imei_preamble + four_records_frame
        frames = []
        for i in range(len(stream)):
            frames.extend(parser.feed(stream[i:i + 1]))
            if i < len(stream) - 1:
                assert frames == []

        assert len(frames) == 1
        assert frames[0].frame.record_count == 4

    def test_multiple_frames_in_one_chunk(self, parser, imei_preamble,
                                          single_record_frame, four_records_frame):
        stream = imei_preamble + single_record_frame + four_records_frame + single_record_frame[:10]
        frames = parser.feed(stream)

        assert [f.frame.record_count for f in frames] == [1, 4]
        assert parser.pending == 10

        frames = parser.feed(single_record_frame[10:])
        assert [f.frame.record_count for f in frames] == [1]
        assert parser.stats["records"] == 6

    def test_imei_decoded_once(self, parser, imei_preamble, single_record_frame):
        parser.feed(imei_preamble)
        # повторная IMEI-преамбула внутри потока - не кадр
        with pytest.raises(InvalidPreamble):
            parser.feed(imei_preamble)

    def test_drops_checksum_mismatch_by_default(self, parser, imei_preamble, stale_four_records_frame,
                                                single_record_frame):
        with patch('core.parser.logger') as mock_logger:
            frames = parser.feed(imei_preamble + stale_four_records_frame + single_record_frame)

        assert [f.frame.record_count for f in frames] == [1]
        assert parser.stats["dropped"] == 1
        mock_logger.warning.assert_called_once()
        args, kwargs = mock_logger.warning.call_args
        assert args == ("frame_integrity_mismatch",)
        assert kwargs["dropped"] is True

    def test_keeps_mismatch_when_configured(self, imei_preamble, builder):
        parser = StreamParser(drop_on_checksum_mismatch=False, drop_on_record_count_mismatch=False)
        raw = builder.frame([builder.record()], echo=5, checksum=0)
        frames = parser.feed(imei_preamble + raw)

        assert len(frames) == 1
        assert frames[0].checksum_valid is False
        assert frames[0].record_count_valid is False
        assert parser.stats["dropped"] == 0

    def test_record_count_policy_independent(self, imei_preamble, builder):
        parser = StreamParser(drop_on_checksum_mismatch=False)
        frames = parser.feed(imei_preamble + builder.frame([builder.record()], echo=2))
        assert frames == []
        assert parser.stats["dropped"] == 1

    def test_fatal_error_propagates(self, parser, imei_preamble, builder):
        with pytest.raises(UnsupportedCodec):
            parser.feed(imei_preamble + builder.frame([builder.record()], codec_id=0x8E))

    def test_buffer_limit(self, imei_preamble):
        parser = StreamParser(max_buffer_size=32)
        parser.feed(imei_preamble)
        with pytest.raises(BufferOverflow) as exc:
            parser.feed(b"\x00" * 40)
        assert exc.value.limit == 32

    def test_huge_declared_length_waits(self, parser, imei_preamble):
        """Заявленная длина больше буфера - ждём данных, без ошибки"""
        frames = parser.feed(imei_preamble + bytes(4) + (1000).to_bytes(4, "big") + b"\x08")
        assert frames == []
        assert parser.pending == 9

    def test_frames_before_fatal_error_delivered(self, parser, imei_preamble,
                                                 single_record_frame, builder):
        bad = builder.frame([builder.record()], codec_id=0x8E)
        with patch('core.parser.logger') as mock_logger:
            frames = parser.feed(imei_preamble + single_record_frame + bad)

        assert [f.frame.records[0].timestamp for f in frames] == [1560161086000]
        assert parser.stats == {"frames": 1, "records": 1, "dropped": 0}
        assert isinstance(parser.error, UnsupportedCodec)
        assert mock_logger.warning.call_args[0] == ("frame_decode_failed",)

        # поток дальше не разбирается
        with pytest.raises(UnsupportedCodec):
            parser.feed(single_record_frame)
        assert parser.stats["frames"] == 1

    def test_error_without_frames_raised_immediately(self, parser, imei_preamble, builder):
        with pytest.raises(UnsupportedCodec):
            parser.feed(imei_preamble + builder.frame([builder.record()], codec_id=0x10))
        assert parser.error is None
