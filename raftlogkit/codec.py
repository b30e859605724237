"""Binary number codecs.

Big-endian encoders whose output sorts the same way as the encoded
numbers (ascending or descending), little-endian fixed-width encoders,
and variable-length (LEB128-style) integer encoders, plus a
:class:`Decoder` that consumes values from the front of a byte string.
"""

from __future__ import annotations

import struct

__all__ = [
    "CodecError",
    "UnexpectedEofError",
    "InvalidDataError",
    "Decoder",
    "encode_i64",
    "encode_i64_desc",
    "encode_u64",
    "encode_u64_desc",
    "encode_u32",
    "encode_u16",
    "encode_var_i64",
    "encode_var_u64",
    "encode_f64",
    "encode_f64_desc",
    "encode_u16_le",
    "encode_f32_le",
    "encode_u32_le",
    "encode_i32_le",
    "encode_f64_le",
    "encode_i64_le",
    "encode_u64_le",
]

SIGN_MARK = 0x8000000000000000
MAX_VAR_I64_LEN = 10
MAX_VAR_U64_LEN = 10

_U64_MASK = (1 << 64) - 1

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")
_F64_BITS = struct.Struct(">d")
_U16_LE = struct.Struct("<H")
_U32_LE = struct.Struct("<I")
_I32_LE = struct.Struct("<i")
_U64_LE = struct.Struct("<Q")
_I64_LE = struct.Struct("<q")
_F32_LE = struct.Struct("<f")
_F64_LE = struct.Struct("<d")


class CodecError(Exception):
    """Base class for codec failures."""


class UnexpectedEofError(CodecError, EOFError):
    """The input ended before a whole value could be decoded."""


class InvalidDataError(CodecError, ValueError):
    """The input holds bytes that do not form a valid value."""


def _check_range(value: int, bits: int, signed: bool) -> int:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        kind = "i" if signed else "u"
        raise OverflowError(f"{value} does not fit in {kind}{bits}")
    return value


def _to_signed64(u: int) -> int:
    return u - (1 << 64) if u & SIGN_MARK else u


def _order_encode_i64(v: int) -> int:
    return (_check_range(v, 64, True) & _U64_MASK) ^ SIGN_MARK


def _order_decode_i64(u: int) -> int:
    return _to_signed64(u ^ SIGN_MARK)


def _f64_to_bits(v: float) -> int:
    return _U64.unpack(_F64_BITS.pack(v))[0]


def _bits_to_f64(u: int) -> float:
    return _F64_BITS.unpack(_U64.pack(u))[0]


def _order_encode_f64(v: float) -> int:
    u = _f64_to_bits(v)
    if u & SIGN_MARK == 0:
        return u | SIGN_MARK
    return ~u & _U64_MASK


def _order_decode_f64(u: int) -> float:
    if u & SIGN_MARK:
        u &= ~SIGN_MARK & _U64_MASK
    else:
        u = ~u & _U64_MASK
    return _bits_to_f64(u)


def encode_u64(v: int) -> bytes:
    """Encode a u64 big-endian; ascending byte order follows value order."""
    return _U64.pack(_check_range(v, 64, False))


def encode_u64_desc(v: int) -> bytes:
    """Encode a u64 so that byte order is the reverse of value order."""
    return _U64.pack(~_check_range(v, 64, False) & _U64_MASK)


def encode_i64(v: int) -> bytes:
    """Encode an i64; ascending byte order follows value order."""
    return _U64.pack(_order_encode_i64(v))


def encode_i64_desc(v: int) -> bytes:
    """Encode an i64 so that byte order is the reverse of value order."""
    return _U64.pack(~_order_encode_i64(v) & _U64_MASK)


def encode_u32(v: int) -> bytes:
    """Encode a u32 big-endian."""
    return _U32.pack(_check_range(v, 32, False))


def encode_u16(v: int) -> bytes:
    """Encode a u16 big-endian."""
    return _U16.pack(_check_range(v, 16, False))


def encode_var_u64(v: int) -> bytes:
    """Encode a u64 as a varint (not memcomparable)."""
    v = _check_range(v, 64, False)
    out = bytearray()
    while v >= 0x80:
        out.append((v & 0x7F) | 0x80)
        v >>= 7
    out.append(v)
    return bytes(out)


def encode_var_i64(v: int) -> bytes:
    """Encode an i64 as a zig-zag varint (not memcomparable)."""
    v = _check_range(v, 64, True)
    vx = ((v & _U64_MASK) << 1) & _U64_MASK
    if v < 0:
        vx = ~vx & _U64_MASK
    return encode_var_u64(vx)


def encode_f64(v: float) -> bytes:
    """Encode an f64; ascending byte order follows value order."""
    return _U64.pack(_order_encode_f64(v))


def encode_f64_desc(v: float) -> bytes:
    """Encode an f64 so that byte order is the reverse of value order."""
    return _U64.pack(~_order_encode_f64(v) & _U64_MASK)


def encode_u16_le(v: int) -> bytes:
    """Encode a u16 little-endian."""
    return _U16_LE.pack(_check_range(v, 16, False))


def encode_f32_le(v: float) -> bytes:
    """Encode an f32 little-endian."""
    return _F32_LE.pack(v)


def encode_u32_le(v: int) -> bytes:
    """Encode a u32 little-endian."""
    return _U32_LE.pack(_check_range(v, 32, False))


def encode_i32_le(v: int) -> bytes:
    """Encode an i32 little-endian."""
    return _I32_LE.pack(_check_range(v, 32, True))


def encode_f64_le(v: float) -> bytes:
    """Encode an f64 little-endian."""
    return _F64_LE.pack(v)


def encode_i64_le(v: int) -> bytes:
    """Encode an i64 little-endian."""
    return _I64_LE.pack(_check_range(v, 64, True))


def encode_u64_le(v: int) -> bytes:
    """Encode a u64 little-endian."""
    return _U64_LE.pack(_check_range(v, 64, False))


class Decoder:
    """Consumes encoded values from the front of a byte string.

    A failed decode leaves the position unchanged.
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def remaining(self) -> bytes:
        """Return the bytes not yet consumed."""
        return self._data[self._pos:]

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise UnexpectedEofError("eof")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self._take(fmt.size))[0]

    def decode_u64(self) -> int:
        return self._unpack(_U64)

    def decode_u64_desc(self) -> int:
        return ~self.decode_u64() & _U64_MASK

    def decode_i64(self) -> int:
        return _order_decode_i64(self.decode_u64())

    def decode_i64_desc(self) -> int:
        return _order_decode_i64(self.decode_u64_desc())

    def decode_u32(self) -> int:
        return self._unpack(_U32)

    def decode_u16(self) -> int:
        return self._unpack(_U16)

    def decode_var_u64(self) -> int:
        data = self._data
        start = self._pos
        length = len(data) - start
        if length > 0:
            first = data[start]
            if first < 0x80:
                self._pos = start + 1
                return first
            if length >= MAX_VAR_U64_LEN or data[-1] < 0x80:
                result = 0
                for i in range(9):
                    b = data[start + i]
                    result |= (b & 0x7F) << (i * 7)
                    if b < 0x80:
                        self._pos = start + i + 1
                        return result
                b = data[start + 9]
                if b <= 1:
                    result |= (b & 0x7F) << 63
                    self._pos = start + 10
                    return result
                raise InvalidDataError("overflow")
        result = 0
        for i, b in enumerate(data[start:]):
            result |= (b & 0x7F) << (i * 7)
            if b < 0x80:
                self._pos = start + i + 1
                return result
        raise UnexpectedEofError("eof")

    def decode_var_i64(self) -> int:
        v = self.decode_var_u64()
        vx = v >> 1
        if v & 1 == 0:
            return vx
        return _to_signed64(~vx & _U64_MASK)

    def decode_f64(self) -> float:
        return _order_decode_f64(self.decode_u64())

    def decode_f64_desc(self) -> float:
        return _order_decode_f64(self.decode_u64_desc())

    def decode_u16_le(self) -> int:
        return self._unpack(_U16_LE)

    def decode_u32_le(self) -> int:
        return self._unpack(_U32_LE)

    def decode_i32_le(self) -> int:
        return self._unpack(_I32_LE)

    def decode_f64_le(self) -> float:
        return self._unpack(_F64_LE)

    def decode_f32_le(self) -> float:
        return self._unpack(_F32_LE)

    def decode_i64_le(self) -> int:
        return self._unpack(_I64_LE)

    def decode_u64_le(self) -> int:
        return self._unpack(_U64_LE)

    def read_u8(self) -> int:
        return self._take(1)[0]