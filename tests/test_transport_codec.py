import pytest

from user_service_api.app.core.errors import InvalidArgumentError
from user_service_api.app.transport.codec import MAX_FRAME_LENGTH, FrameDecoder, encode_frame


def test_encode_frame_prefixes_length():
    assert encode_frame({"pattern": {"cmd": "get_users"}}) == b'31#{"pattern":{"cmd":"get_users"}}'


def test_encode_frame_is_ascii_only():
    frame = encode_frame({"name": "Zoë"})
    assert frame == b'19#{"name":"Zo\\u00eb"}'


def test_decoder_handles_frames_split_across_reads():
    frame = encode_frame({"id": "1", "response": [1, 2, 3]})
    decoder = FrameDecoder()

    assert decoder.feed(frame[:1]) == []
    assert decoder.feed(frame[1:10]) == []
    assert decoder.feed(frame[10:]) == [{"id": "1", "response": [1, 2, 3]}]


def test_decoder_returns_every_frame_in_one_read():
    data = encode_frame({"a": 1}) + encode_frame({"b": 2}) + encode_frame({"c": 3})[:4]
    decoder = FrameDecoder()

    assert decoder.feed(data) == [{"a": 1}, {"b": 2}]
    assert decoder.feed(encode_frame({"c": 3})[4:]) == [{"c": 3}]


def test_decoder_counts_characters_not_bytes():
    text = '{"n":"é"}'
    raw = f"{len(text)}#{text}".encode("utf-8")
    split = raw.index("é".encode("utf-8")) + 1  # inside the two-byte sequence
    decoder = FrameDecoder()

    assert decoder.feed(raw[:split]) == []
    assert decoder.feed(raw[split:]) == [{"n": "é"}]


@pytest.mark.parametrize(
    "data",
    [
        b'abc#{"a":1}',
        b"#{}",
        b"12x",
        b"3#[1]",
        b"5#{bad}",
        b"\xff\xfe",
    ],
)
def test_decoder_rejects_malformed_input(data):
    with pytest.raises(InvalidArgumentError):
        FrameDecoder().feed(data)


def test_decoder_rejects_oversized_length_prefix():
    with pytest.raises(InvalidArgumentError):
        FrameDecoder().feed(f"{MAX_FRAME_LENGTH + 1}#".encode("ascii"))


def test_decoder_rejects_unterminated_length_prefix():
    decoder = FrameDecoder()
    with pytest.raises(InvalidArgumentError):
        decoder.feed(b"9" * 64)


def test_decoder_accepts_frame_at_length_limit():
    decoder = FrameDecoder()
    assert decoder.feed(f"{MAX_FRAME_LENGTH}#".encode("ascii") + b"{}") == []
