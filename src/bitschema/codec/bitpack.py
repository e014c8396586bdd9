"""Bit-level packing and unpacking utilities.

This module provides the bit cursor used by both interpreters. Reads and
writes address a window of whole bytes and may straddle byte boundaries.
All operations are big-endian and MSB-first.
"""

from __future__ import annotations


class BitPacker:
    """Packs unsigned values into a growable byte buffer.

    The packer owns its output. While the bit offset is non-zero the last
    byte in the buffer is incomplete, and the next write merges into its low
    unused bits instead of appending after it.

    Example:
        >>> packer = BitPacker()
        >>> packer.write_uint(0b1101, 4)
        >>> packer.write_uint(0b10, 2)
        >>> packer.write_uint(0b01, 2)
        >>> packer.to_bytes()
        b'\\xd9'
    """

    def __init__(self) -> None:
        """Initialize an empty bit packer."""
        self._buffer = bytearray()
        self._bit_offset = 0  # bits used in the last byte, 0 when aligned

    @property
    def bit_offset(self) -> int:
        """Bit position within the current byte (0-7)."""
        return self._bit_offset

    def write_uint(self, value: int, num_bits: int) -> None:
        """Write an unsigned integer using the specified number of bits.

        Values wider than ``num_bits`` are clipped to their low ``num_bits``
        bits; a 4-bit write of 0b10111 stores 0b0111.

        Args:
            value: Integer value to write
            num_bits: Number of bits to use for encoding (>= 1, no upper limit)

        Raises:
            ValueError: If num_bits is not positive
        """
        if num_bits < 1:
            raise ValueError(f"num_bits must be positive, got {num_bits}")

        value &= (1 << num_bits) - 1

        end = self._bit_offset + num_bits
        window_bytes = (end + 7) // 8

        # Reopen the incomplete last byte so the new bits land in its low bits
        current = self._buffer.pop() if self._bit_offset else 0

        window = (current << (window_bytes * 8 - 8)) | (value << (window_bytes * 8 - end))
        self._buffer.extend(window.to_bytes(window_bytes, "big"))
        self._bit_offset = end % 8

    def write_zeros(self, num_bits: int) -> None:
        """Write ``num_bits`` zero bits.

        Args:
            num_bits: Number of zero bits to write
        """
        self.write_uint(0, num_bits)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes (byte-aligned).

        Args:
            data: Bytes to write

        Raises:
            ValueError: If the packer is not on a byte boundary
        """
        if self._bit_offset:
            raise ValueError(f"write_bytes requires byte alignment, bit offset is {self._bit_offset}")
        self._buffer.extend(data)

    def bit_length(self) -> int:
        """Return the current number of bits written.

        Returns:
            Number of bits in the buffer
        """
        if self._bit_offset:
            return (len(self._buffer) - 1) * 8 + self._bit_offset
        return len(self._buffer) * 8

    def to_bytes(self) -> bytes:
        """Return the packed bytes.

        An incomplete last byte is already zero-filled on the right (LSB side).

        Returns:
            Packed bytes
        """
        return bytes(self._buffer)


class BitUnpacker:
    """Unpacks unsigned values from a byte buffer.

    The unpacker tracks an absolute byte index and a bit offset (0-7) inside
    that byte. It only moves forward.

    Example:
        >>> unpacker = BitUnpacker(bytes([0b00001111, 0b01101100]))
        >>> unpacker.read_uint(4), unpacker.read_uint(1), unpacker.read_uint(4)
        (0, 1, 14)
        >>> unpacker.read_uint(7)
        108
    """

    def __init__(self, data: bytes) -> None:
        """Initialize a bit unpacker with the given data.

        Args:
            data: Byte buffer to unpack
        """
        self._data = bytes(data)
        self._byte_index = 0
        self._bit_offset = 0

    @property
    def bit_offset(self) -> int:
        """Bit position within the current byte (0-7)."""
        return self._bit_offset

    def _require(self, num_bits: int) -> None:
        if num_bits < 0:
            raise ValueError(f"num_bits must not be negative, got {num_bits}")
        if num_bits > self.bits_remaining():
            raise IndexError(
                f"Not enough bits: need {num_bits}, have {self.bits_remaining()}"
            )

    def _advance(self, num_bits: int) -> None:
        end = self._bit_offset + num_bits
        self._byte_index += end // 8
        self._bit_offset = end % 8

    def read_uint(self, num_bits: int) -> int:
        """Read an unsigned integer of the specified bit width.

        The read covers ``ceil((bit_offset + num_bits) / 8)`` bytes starting
        at the current byte; the requested bits are sliced out of that window.

        Args:
            num_bits: Number of bits to read (>= 1, no upper limit)

        Returns:
            Unsigned integer value

        Raises:
            ValueError: If num_bits is not positive
            IndexError: If not enough bits are available
        """
        if num_bits < 1:
            raise ValueError(f"num_bits must be positive, got {num_bits}")
        self._require(num_bits)

        end = self._bit_offset + num_bits
        window_bytes = (end + 7) // 8
        window = int.from_bytes(
            self._data[self._byte_index : self._byte_index + window_bytes], "big"
        )
        value = (window >> (window_bytes * 8 - end)) & ((1 << num_bits) - 1)

        self._advance(num_bits)
        return value

    def skip(self, num_bits: int) -> None:
        """Advance past ``num_bits`` bits without parsing them.

        Args:
            num_bits: Number of bits to skip

        Raises:
            IndexError: If not enough bits are available
        """
        self._require(num_bits)
        self._advance(num_bits)

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes (byte-aligned).

        Args:
            num_bytes: Number of bytes to read

        Returns:
            Bytes read from buffer

        Raises:
            ValueError: If the unpacker is not on a byte boundary
            IndexError: If not enough bytes are available
        """
        if self._bit_offset:
            raise ValueError(f"read_bytes requires byte alignment, bit offset is {self._bit_offset}")
        self._require(num_bytes * 8)

        result = self._data[self._byte_index : self._byte_index + num_bytes]
        self._byte_index += num_bytes
        return result

    def bits_remaining(self) -> int:
        """Return the number of bits remaining in the buffer.

        Returns:
            Number of unread bits
        """
        return (len(self._data) - self._byte_index) * 8 - self._bit_offset

    def position(self) -> tuple[int, int]:
        """Return the current cursor position.

        Returns:
            Tuple of (byte index, bit offset)
        """
        return self._byte_index, self._bit_offset
