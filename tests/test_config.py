import pytest
from hypothesis import given, strategies as st

from raftlogkit.config import Config, ReadableSize, RecoveryMode
from raftlogkit.errors import InvalidArgumentError, OtherError


def test_serde():
    value = Config()
    dump = value.to_toml()
    load = Config.from_toml(dump)
    assert value == load


def test_serde_after_sanitize():
    value = Config()
    value.sanitize()
    assert Config.from_toml(value.to_toml()) == value


def test_custom():
    custom = """
        dir = "custom_dir"
        recovery-mode = "tolerate-tail-corruption"
        bytes-per-sync = "2KB"
        target-file-size = "1MB"
        purge-threshold = "3MB"
    """
    load = Config.from_toml(custom)
    assert load.dir == "custom_dir"
    assert load.recovery_mode is RecoveryMode.TOLERATE_TAIL_CORRUPTION
    assert load.bytes_per_sync == ReadableSize.kb(2)
    assert load.target_file_size == ReadableSize.mb(1)
    assert load.purge_threshold == ReadableSize.mb(3)


def test_invalid():
    hard_error = """
        target-file-size = "5MB"
        purge-threshold = "3MB"
    """
    hard_load = Config.from_toml(hard_error)
    with pytest.raises(OtherError):
        hard_load.sanitize()

    soft_error = """
        recovery-read-block-size = "1KB"
        recovery-threads = 0
        bytes-per-sync = "0KB"
        target-file-size = "5000MB"
    """
    soft = Config.from_toml(soft_error)
    soft.sanitize()
    assert soft.recovery_read_block_size.value >= 512
    assert soft.recovery_threads >= 1
    assert soft.bytes_per_sync.value == 2**64 - 1
    assert soft.purge_rewrite_threshold == soft.target_file_size


def test_backward_compatibility():
    old = """
        recovery-mode = "tolerate-corrupted-tail-records"
    """
    load = Config.from_toml(old)
    load.sanitize()
    assert load.recovery_mode is RecoveryMode.TOLERATE_TAIL_CORRUPTION
    assert "tolerate-corrupted-tail-records" in load.to_toml()


def test_small_block_size_raised_to_minimum():
    cfg = Config(recovery_read_block_size=ReadableSize(100))
    cfg.sanitize()
    assert cfg.recovery_read_block_size == ReadableSize(512)


def test_default_rewrite_threshold():
    cfg = Config()
    cfg.sanitize()
    assert cfg.purge_rewrite_threshold == ReadableSize.gb(1)


def test_explicit_rewrite_threshold_kept():
    cfg = Config(purge_rewrite_threshold=ReadableSize.mb(7))
    cfg.sanitize()
    assert cfg.purge_rewrite_threshold == ReadableSize.mb(7)


def test_unknown_keys_ignored():
    cfg = Config.from_toml('unknown-key = 1\ndir = "d"')
    assert cfg == Config(dir="d")


@pytest.mark.parametrize(
    "text",
    ['recovery-mode = "sometimes"', "recovery-threads = -1", 'bytes-per-sync = "3XB"', "dir = 5"],
)
def test_bad_values(text):
    with pytest.raises(InvalidArgumentError):
        Config.from_toml(text)


def test_bad_toml():
    with pytest.raises(InvalidArgumentError):
        Config.from_toml("dir = ")


@pytest.mark.parametrize(
    "text, size",
    [
        ("16KB", ReadableSize.kb(16)),
        ("4MB", ReadableSize.mb(4)),
        ("10GB", ReadableSize.gb(10)),
        ("512B", ReadableSize(512)),
        ("0KB", ReadableSize(0)),
        ("1KiB", ReadableSize.kb(1)),
    ],
)
def test_readable_size_parse(text, size):
    assert ReadableSize.parse(text) == size


@pytest.mark.parametrize(
    "size, text",
    [
        (ReadableSize.kb(16), "16KB"),
        (ReadableSize.mb(128), "128MB"),
        (ReadableSize.gb(10), "10GB"),
        (ReadableSize(0), "0KB"),
        (ReadableSize(512), "512B"),
    ],
)
def test_readable_size_str(size, text):
    assert str(size) == text


@pytest.mark.parametrize("text", ["", "abc", "-1KB", "1XB", "KB"])
def test_readable_size_parse_errors(text):
    with pytest.raises(InvalidArgumentError):
        ReadableSize.parse(text)


def test_readable_size_order():
    assert ReadableSize.kb(1) < ReadableSize.mb(1) < ReadableSize.gb(1)


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_readable_size_round_trip(value):
    size = ReadableSize(value)
    assert ReadableSize.parse(str(size)) == size


@pytest.mark.parametrize("mode", list(RecoveryMode))
def test_recovery_mode_round_trip(mode):
    cfg = Config(recovery_mode=mode)
    assert Config.from_toml(cfg.to_toml()).recovery_mode is mode