# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

r"""
Primitive read/write runtime shared by every generated module.

Everything after this docstring is copied verbatim into generated code, so this module must only depend on the
standard library and must not refer to anything else in `wirebind`.

Numbers are always written as LEB128-style unsigned varints (7 payload bits per byte, least-significant group first,
high bit set on every byte but the last). Signed numbers are zigzag-mapped to unsigned before being written, so that
small magnitudes stay small:

>>> s = Serializer()
>>> s.serialize_number(U8_BYTES, False, 5)
>>> s.serialize_number(U16_BYTES, False, 300)
>>> s.serialize_number(U32_BYTES, True, -1)
>>> s.serialize_number(U32_BYTES, True, 1)
>>> s.finish().hex()
'05ac020102'

Strings and bytes are prefixed with their length in bytes, arrays with their length in items:

>>> s = Serializer()
>>> s.serialize_string('hi')
>>> s.serialize_array(lambda s, v: s.serialize_number(U8_BYTES, False, v), [1, 2])
>>> s.serialize_optional(lambda s, v: s.serialize_bytes(v), None)
>>> s.finish().hex()
'02686902010200'

An absent optional is the single flag byte 00, a present one is 01 followed by the value:

>>> d = Deserializer(bytes.fromhex('02686902010200'))
>>> d.deserialize_string()
'hi'
>>> d.deserialize_array(lambda d: d.deserialize_number(U8_BYTES, False))
[1, 2]
>>> d.deserialize_optional(lambda d: d.deserialize_bytes()) is None
True
>>> d.is_empty()
True

Since an absent value is `None`, a nested optional cannot tell `Some(None)` apart from `None`: the bytes 01 00 decode to
`None`, which encodes back as 00.
"""

U8_BYTES = 1
U16_BYTES = 2
U32_BYTES = 4
U64_BYTES = 8
U128_BYTES = 16

# length prefixes are machine-word sized
LENGTH_BYTES = U64_BYTES

# items that take no bytes on the wire (unit structs, empty structs) cannot be bounded by the remaining input, arrays
# of them are capped at this many items instead
MAX_ZERO_SIZE_ITEMS = 1 << 16


class WireError(Exception):
    """Base class for every error raised by `serialize` and `deserialize`."""
    pass


class UnknownType(WireError):
    """Raised when the type name given to `serialize`/`deserialize` was not registered."""
    pass


class MalformedTypeKey(WireError):
    """Raised when the type name given to `serialize`/`deserialize` is not a string."""
    pass


class NumericOverflow(WireError):
    """Raised when a number does not fit the width it was declared with."""
    pass


class SerializationError(WireError):
    pass


class ShapeMismatch(SerializationError):
    """Raised when a value does not have the shape of the type it is being serialized as."""
    pass


class DeserializationError(WireError):
    pass


class InvalidDiscriminant(DeserializationError):
    """Raised when an enum index or optional flag read from the wire is not a known one."""
    pass


class BufferUnderrun(DeserializationError):
    """Raised when decoding needs more bytes than what remains."""
    pass


class InvalidString(DeserializationError):
    """Raised when a string read from the wire is not valid UTF-8."""
    pass


class TrailingData(DeserializationError):
    """Raised by an exact deserialization when bytes remain after the value."""
    pass


class NestingTooDeep(DeserializationError):
    """Raised when a value is nested deeper than the interpreter recursion limit allows to decode."""
    pass


def number_bounds(byte_size, signed):
    bits = byte_size * 8
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def zigzag_encode(value, bits):
    return (value << 1) ^ (value >> (bits - 1))


def zigzag_decode(value):
    return (value >> 1) ^ -(value & 1)


def is_number(value, byte_size, signed):
    # bool is a subclass of int but never a valid number here
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    lower, upper = number_bounds(byte_size, signed)
    return lower <= value <= upper


def is_string(value):
    return isinstance(value, str)


def is_bytes(value):
    return isinstance(value, (bytes, bytearray))


def is_array(value, predicate):
    return isinstance(value, (list, tuple)) and all(predicate(item) for item in value)


def is_optional(value, predicate):
    return value is None or predicate(value)


def is_sequence(value, length):
    return isinstance(value, (list, tuple)) and len(value) == length


class Serializer:
    """ Writes values into an in-memory byte buffer, call `finish` to get the result.
    """

    __slots__ = ('_buf',)

    def __init__(self):
        self._buf = bytearray()

    def cur_pos(self):
        return len(self._buf)

    def finish(self):
        """Get the resulting byte sequence."""
        return bytes(self._buf)

    def write_byte(self, data):
        self._buf.append(data)

    def write_bytes(self, data):
        self._buf += data

    def write_varint(self, value):
        while value >= 0x80:
            self._buf.append((value & 0x7f) | 0x80)
            value >>= 7
        self._buf.append(value)

    def serialize_number(self, byte_size, signed, value):
        lower, upper = number_bounds(byte_size, signed)
        if not lower <= value <= upper:
            raise NumericOverflow(f'{value} does not fit in {byte_size} byte(s), signed={signed}')
        if signed:
            value = zigzag_encode(value, byte_size * 8)
        self.write_varint(value)

    def serialize_string(self, value):
        try:
            data = value.encode('utf-8')
        except UnicodeEncodeError as e:
            raise ShapeMismatch('string cannot be encoded as utf-8') from e
        self.serialize_bytes(data)

    def serialize_bytes(self, value):
        self.write_varint(len(value))
        self.write_bytes(value)

    def serialize_array(self, encoder, values):
        self.write_varint(len(values))
        for value in values:
            encoder(self, value)

    def serialize_optional(self, encoder, value):
        if value is None:
            self.serialize_number(U32_BYTES, False, 0)
        else:
            self.serialize_number(U32_BYTES, False, 1)
            encoder(self, value)


class Deserializer:
    """ Reads values from a byte sequence, the view is shortened as bytes are consumed.
    """

    __slots__ = ('_view',)

    def __init__(self, data):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f'expected a bytes-like object, got {type(data).__name__}')
        self._view = memoryview(bytes(data))

    def is_empty(self):
        return not self._view

    def remaining(self):
        return len(self._view)

    def finalize(self):
        """Raise `TrailingData` if anything was left unread."""
        if not self.is_empty():
            raise TrailingData(f'{len(self._view)} trailing byte(s)')

    def read_byte(self):
        if not self._view:
            raise BufferUnderrun('not enough bytes to read')
        byte = self._view[0]
        self._view = self._view[1:]
        return byte

    def read_bytes(self, n):
        if len(self._view) < n:
            raise BufferUnderrun(f'need {n} byte(s), only {len(self._view)} left')
        data = bytes(self._view[:n])
        self._view = self._view[n:]
        return data

    def read_varint(self, max_bytes):
        result = 0
        for i in range(max_bytes):
            byte = self.read_byte()
            result |= (byte & 0x7f) << (7 * i)
            if not byte & 0x80:
                return result
        raise NumericOverflow(f'varint longer than {max_bytes} byte(s)')

    def deserialize_number(self, byte_size, signed):
        bits = byte_size * 8
        value = self.read_varint(-(-bits // 7))
        if value >> bits:
            raise NumericOverflow(f'{value} does not fit in {byte_size} byte(s)')
        if signed:
            return zigzag_decode(value)
        return value

    def read_length(self, min_item_size):
        length = self.deserialize_number(LENGTH_BYTES, False)
        if length * min_item_size > len(self._view):
            raise BufferUnderrun(f'length prefix {length} exceeds the {len(self._view)} remaining byte(s)')
        if min_item_size == 0 and length > MAX_ZERO_SIZE_ITEMS:
            raise BufferUnderrun(f'length prefix {length} exceeds the limit of {MAX_ZERO_SIZE_ITEMS} zero-size items')
        return length

    def deserialize_string(self):
        data = self.deserialize_bytes()
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidString('string is not valid utf-8') from e

    def deserialize_bytes(self):
        return self.read_bytes(self.read_length(1))

    def deserialize_array(self, decoder, min_item_size=1):
        length = self.read_length(min_item_size)
        return [decoder(self) for _ in range(length)]

    def deserialize_optional(self, decoder):
        flag = self.deserialize_number(U32_BYTES, False)
        if flag == 0:
            return None
        if flag == 1:
            return decoder(self)
        raise InvalidDiscriminant(f'invalid optional flag: {flag}')
