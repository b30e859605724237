# raftlogkit

Building blocks for a log-structured store of Raft log entries: number
encodings, engine configuration, a checker for holes in entry indexes,
event hooks and a small file-system layer with positional I/O.

## Modules

### `raftlogkit.codec`

Encoders are plain functions that return `bytes`:

- Big-endian, order-preserving: `encode_u64`, `encode_i64`, `encode_u32`,
  `encode_u16`, `encode_f64`. Sorting the encoded bytes sorts the values.
- Order-reversing: `encode_u64_desc`, `encode_i64_desc`, `encode_f64_desc`.
- Little-endian fixed width: `encode_u16_le`, `encode_u32_le`,
  `encode_i32_le`, `encode_u64_le`, `encode_i64_le`, `encode_f32_le`,
  `encode_f64_le`.
- Varints: `encode_var_u64` (the same bytes as a protobuf `uint64` without a
  tag) and `encode_var_i64` (zig-zag). These are not memcomparable.

Integer encoders raise `OverflowError` when a value does not fit the width.

`Decoder(data)` consumes values from the front of a byte string with the
matching `decode_*` methods and `read_u8()`; `remaining()` returns what is
left. Running out of input raises `UnexpectedEofError`; a varint longer than
64 bits raises `InvalidDataError`. Both derive from `CodecError`, and a failed
decode leaves the position where it was.

### `raftlogkit.errors`

`EngineError` and its subclasses `InvalidArgumentError`, `CorruptionError`,
`EngineIoError`, `EngineCodecError`, `EntryCompactedError`,
`EntryNotFoundError`, `FullError` and `OtherError`. Each keeps its message or
underlying exception in `detail`, and `str()` gives e.g.
`"Invalid Argument: ..."`.

### `raftlogkit.config`

- `ReadableSize`: a byte count. Build it with `ReadableSize(n)`,
  `ReadableSize.kb(n)`, `.mb(n)`, `.gb(n)` or `ReadableSize.parse("4MB")`
  (units B, K/KB/KiB up to P/PB/PiB, fractions such as `"1.5KB"`). It prints
  in the largest unit that divides it exactly, e.g. `"16KB"`.
- `RecoveryMode`: `ABSOLUTE_CONSISTENCY`, `TOLERATE_TAIL_CORRUPTION`,
  `TOLERATE_ANY_CORRUPTION`. The older name
  `"tolerate-corrupted-tail-records"` is accepted when reading and is the
  name written for `TOLERATE_TAIL_CORRUPTION`.
- `Config`: a dataclass with `dir`, `recovery_mode`,
  `recovery_read_block_size` (16KB), `recovery_threads` (4),
  `batch_compression_threshold` (8KB), `bytes_per_sync` (4MB),
  `target_file_size` (128MB), `purge_threshold` (10GB),
  `purge_rewrite_threshold` (unset) and `purge_rewrite_garbage_ratio` (0.6).
  `from_dict`/`to_dict` and `from_toml`/`to_toml` use kebab-case keys;
  missing keys keep their defaults and unknown keys are ignored.

`Config.sanitize()` raises `OtherError` if `purge_threshold` is smaller than
`target_file_size`. Otherwise it sets an unset `purge_rewrite_threshold` to the
larger of `purge_threshold / 10` and `target_file_size`, turns a zero
`bytes_per_sync` into the largest u64, and raises a too small
`recovery_read_block_size` (minimum 512 bytes) or `recovery_threads` (minimum
1) to the minimum with a logged warning.

### `raftlogkit.consistency`

`ConsistencyChecker` finds gaps in the entry indexes of each Raft group.
`replay(items, file_id)` takes `(raft_group_id, indexes)` pairs in log order;
`merge(other, queue)` appends the state of a checker that scanned later files;
`finish()` returns `{raft_group_id: last_valid_index}` for every group with a
hole.

```python
from raftlogkit.consistency import ConsistencyChecker

checker = ConsistencyChecker()
checker.replay([(1, [1, 2, 3]), (1, [6, 7])], file_id=None)
assert checker.finish() == {1: 3}
```

### `raftlogkit.event_listener`

`EventListener` has the hooks `post_new_log_file`, `on_append_log_file`,
`post_apply_memtables`, `first_file_not_ready_for_purge` and `post_purge`.
Override them in a subclass or pass callables to the constructor
(`on_new_log_file`, `on_append`, `on_apply`, `on_purge_barrier`, `on_purge`).
A hook that is neither does nothing; `first_file_not_ready_for_purge` then
returns `None`.

### `raftlogkit.filesystem`

- `LogFd`: a file opened read-write (`LogFd.open`, or `LogFd.create` to create
  it if missing) with `read(offset, size)`, `write(offset, content)`,
  `truncate`, `allocate`, `sync`, `file_size` and `close`. It is a context
  manager and closes itself when collected.
- `LogFile`: a positioned reader and writer over a `LogFd` with `read`,
  `write`, `seek`, `tell`, `flush`, `truncate`, `sync` and `allocate`.
- `DefaultFileSystem`: `create`, `open`, `new_reader` and `new_writer`,
  the last two returning a `LogFile`.
- `ObfuscatedFileSystem`: the same interface, but its `ObfuscatedWriter` stores
  each byte plus one and its `ObfuscatedReader` subtracts one again. Both move
  a single byte per `read`/`write` call, which makes them useful for checking
  that callers handle short reads and writes and really go through the
  file-system layer.

File access uses `os.pread` and `os.pwrite`, so a POSIX system is needed.

## What the package does not do

There is no storage engine here: nothing writes or replays log batches, keeps
memtables, rotates or purges log files, or reads a directory of log files back.
`ConsistencyChecker` works on the index lists it is given, not on files. There
is no command-line tool.

## Installing

```
pip install raftlogkit
```

## Examples

```python
from raftlogkit.codec import Decoder, encode_u64, encode_var_u64

buf = encode_u64(42) + encode_var_u64(300)
dec = Decoder(buf)
assert dec.decode_u64() == 42
assert dec.decode_var_u64() == 300
assert dec.remaining() == b""
```

```python
from raftlogkit.config import Config, ReadableSize

cfg = Config.from_toml('''
dir = "data"
target-file-size = "1MB"
purge-threshold = "3MB"
''')
cfg.sanitize()
assert cfg.target_file_size == ReadableSize.mb(1)
print(cfg.to_toml())
```

```python
from raftlogkit.filesystem import DefaultFileSystem

fs = DefaultFileSystem()
with fs.create("example.log") as handle:
    writer = fs.new_writer(handle)
    writer.write(b"hello")
    writer.sync()
    reader = fs.new_reader(handle)
    assert reader.read(5) == b"hello"
```

## Running the tests

```
pip install raftlogkit[test]
pytest
```