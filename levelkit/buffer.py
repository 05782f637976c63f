"""A growable byte buffer with separate read and write ends."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Union

BytesLike = Union[bytes, bytearray, memoryview]


class _Reader(Protocol):
    def read(self, n: int) -> Optional[bytes]: ...


class _Writer(Protocol):
    def write(self, data: bytes) -> Optional[int]: ...


class Buffer:
    """A variable-sized byte buffer: bytes are written at the end and read from the front."""

    MIN_READ = 512
    _READ_CHUNK = 64 * 1024

    def __init__(self, data: BytesLike = b"") -> None:
        self._buf = bytearray(data)
        self._off = 0

    def __len__(self) -> int:
        return len(self._buf) - self._off

    def __str__(self) -> str:
        return self._buf[self._off:].decode("latin-1")

    def __repr__(self) -> str:
        return f"Buffer({self.bytes()!r})"

    def bytes(self) -> bytes:
        """Return a copy of the unread portion of the buffer."""
        return bytes(self._buf[self._off:])

    def _edit(self, change: Callable[[bytearray], None]) -> None:
        # A view handed out by alloc() pins the storage; detach from it.
        try:
            change(self._buf)
        except BufferError:
            self._buf = bytearray(self._buf)
            change(self._buf)

    def _compact(self) -> None:
        if self._off == 0:
            return
        if self._off >= len(self._buf):
            self._buf = bytearray()
            self._off = 0
        elif self._off * 2 >= len(self._buf):
            consumed = self._off
            self._edit(lambda b: b.__delitem__(slice(None, consumed)))
            self._off = 0

    def truncate(self, n: int) -> None:
        """Discard all but the first ``n`` unread bytes."""
        if n < 0 or n > len(self):
            raise ValueError("buffer truncation out of range")
        if n == 0:
            self._buf = bytearray()
            self._off = 0
            return
        end = self._off + n
        self._edit(lambda b: b.__delitem__(slice(end, None)))

    def reset(self) -> None:
        """Empty the buffer."""
        self.truncate(0)

    def grow(self, n: int) -> None:
        """Prepare room for ``n`` more bytes, reclaiming consumed space."""
        if n < 0:
            raise ValueError("buffer grow: negative count")
        self._compact()

    def alloc(self, n: int) -> memoryview:
        """Append ``n`` zero bytes and return a writable view of them.

        The view stays attached to the buffer only until the next write.
        """
        if n < 0:
            raise ValueError("buffer alloc: negative count")
        self._compact()
        start = len(self._buf)
        self._edit(lambda b: b.extend(bytes(n)))
        return memoryview(self._buf)[start:]

    def write(self, data: BytesLike) -> int:
        """Append ``data`` and return the number of bytes written."""
        chunk = bytes(data)
        self._compact()
        self._edit(lambda b: b.extend(chunk))
        return len(chunk)

    def write_byte(self, c: int) -> None:
        """Append a single byte."""
        if not 0 <= c <= 0xFF:
            raise ValueError(f"byte value out of range: {c}")
        self._edit(lambda b: b.append(c))

    def read(self, n: int = -1) -> bytes:
        """Read up to ``n`` bytes (all when negative); ``b""`` once drained."""
        if self._off >= len(self._buf):
            self.reset()
            return b""
        if n < 0:
            n = len(self)
        chunk = bytes(self._buf[self._off:self._off + n])
        self._off += len(chunk)
        return chunk

    def next(self, n: int) -> bytes:
        """Return the next ``n`` bytes (or fewer if not available), consuming them."""
        if n < 0:
            raise ValueError("buffer next: negative count")
        n = min(n, len(self))
        chunk = bytes(self._buf[self._off:self._off + n])
        self._off += n
        return chunk

    def read_byte(self) -> int:
        """Read one byte; raise EOFError when the buffer is empty."""
        if self._off >= len(self._buf):
            self.reset()
            raise EOFError("buffer is empty")
        c = self._buf[self._off]
        self._off += 1
        return c

    def read_bytes(self, delim: Union[int, BytesLike]) -> bytes:
        """Read up to and including ``delim``.

        If the delimiter is not found, the rest of the buffer is returned; the
        result then does not end with the delimiter.
        """
        if not isinstance(delim, int):
            if len(delim) != 1:
                raise ValueError("delimiter must be a single byte")
            delim = delim[0]
        i = self._buf.find(delim, self._off)
        end = len(self._buf) if i < 0 else i + 1
        line = bytes(self._buf[self._off:end])
        self._off = end
        return line

    def read_from(self, reader: _Reader) -> int:
        """Append everything ``reader`` yields until it is exhausted."""
        self._compact()
        total = 0
        while True:
            chunk = reader.read(self._READ_CHUNK)
            if not chunk:
                return total
            total += self.write(chunk)

    def write_to(self, writer: _Writer) -> int:
        """Write the unread bytes to ``writer`` and return how many were written."""
        written = 0
        if self._off < len(self._buf):
            pending = len(self)
            data = self.bytes()
            result = writer.write(data)
            written = pending if result is None else result
            if written > pending:
                raise ValueError("invalid write count")
            self._off += written
            if written != pending:
                raise OSError("short write")
        self.reset()
        return written