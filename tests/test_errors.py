import pytest

from raftlogkit.codec import Decoder, UnexpectedEofError
from raftlogkit.errors import (
    CorruptionError,
    EngineCodecError,
    EngineError,
    EngineIoError,
    EntryCompactedError,
    EntryNotFoundError,
    FullError,
    InvalidArgumentError,
    OtherError,
)


@pytest.mark.parametrize(
    "error, text",
    [
        (InvalidArgumentError("bad dir"), "Invalid Argument: bad dir"),
        (CorruptionError("bad crc"), "Corruption: bad crc"),
        (OtherError("purge-threshold < target-file-size"),
         "Other Error: purge-threshold < target-file-size"),
        (EntryCompactedError(), "Entry Compacted"),
        (EntryNotFoundError(), "Entry Not Found"),
        (FullError(), "Full"),
    ],
)
def test_messages(error, text):
    assert str(error) == text


@pytest.mark.parametrize(
    "cls",
    [
        InvalidArgumentError,
        CorruptionError,
        EngineIoError,
        EngineCodecError,
        EntryCompactedError,
        EntryNotFoundError,
        FullError,
        OtherError,
    ],
)
def test_all_caught_as_engine_error(cls):
    error = cls("detail")
    assert error.detail == "detail"
    assert EngineError in type(error).__mro__
    with pytest.raises(EngineError) as info:
        raise error
    assert info.value.detail == "detail"


def test_invalid_argument_is_value_error():
    error = InvalidArgumentError("nope")
    assert ValueError in type(error).__mro__
    assert error.detail == "nope"
    assert str(error) == "Invalid Argument: nope"


def test_io_error_wraps_cause():
    cause = OSError("disk gone")
    error = EngineIoError(cause)
    assert error.detail is cause
    assert str(error) == "IO Error: disk gone"


def test_codec_error_wraps_decoder_failure():
    with pytest.raises(UnexpectedEofError) as info:
        Decoder(b"").read_u8()
    error = EngineCodecError(info.value)
    assert error.detail is info.value
    assert str(error) == "Codec Error: eof"


def test_no_detail():
    error = FullError()
    assert error.detail is None
    assert error.args == ()