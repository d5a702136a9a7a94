"""
Forward-only extraction of named entries from a UDF container (ZIP stream).

Entries are read in stream order by walking local file headers; the
central directory is never consulted, so the input does not need to be
seekable.  Stored and deflated entries are supported, including entries
whose sizes only appear in a trailing data descriptor (deflate end-of-stream
marks the end of such entries) and Zip64 sizes in the local extra field.
Reading stops at the first record after an entry that is not a local file
header, keeping the entries read so far.
"""

from __future__ import annotations

__all__ = [
    "ContainerContents",
    "ExtractedEntry",
    "iter_entries",
    "read_container",
]

import logging
import struct
import zlib
from collections.abc import Collection, Iterator
from dataclasses import dataclass
from typing import BinaryIO

from ..constants import CONTENT_ENTRY, DEFAULT_MAX_ENTRY_SIZE, READ_CHUNK_SIZE, SIGNATURE_ENTRY
from ..errors import ContainerError, FormatError

_logger = logging.getLogger(__name__)

# Record signatures
_LOCAL_HEADER_SIG = b"PK\x03\x04"
_DATA_DESCRIPTOR_SIG = b"PK\x07\x08"
_TRAILER_SIGS = (
    b"PK\x01\x02",  # central directory file header
    b"PK\x05\x06",  # end of central directory
    b"PK\x06\x06",  # zip64 end of central directory
    b"PK\x06\x07",  # zip64 end of central directory locator
)

# version(2), flags(2), method(2), time(2), date(2), crc(4), csize(4), usize(4), nlen(2), xlen(2)
_LOCAL_HEADER = struct.Struct("<HHHHHIIIHH")

_FLAG_ENCRYPTED = 0x0001
_FLAG_DATA_DESCRIPTOR = 0x0008
_FLAG_UTF8 = 0x0800

_METHOD_STORED = 0
_METHOD_DEFLATED = 8

_ZIP64_EXTRA_ID = 0x0001
_ZIP64_MARKER = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class ExtractedEntry:
    """A named entry read from the container."""

    name: str
    data: bytes


@dataclass(frozen=True, slots=True)
class ContainerContents:
    """The two entries the signature check needs; either may be absent."""

    content: bytes | None
    signature: bytes | None


@dataclass(frozen=True, slots=True)
class _LocalHeader:
    name: str
    flags: int
    method: int
    crc: int
    compressed_size: int
    uncompressed_size: int
    zip64: bool

    @property
    def has_descriptor(self) -> bool:
        return bool(self.flags & _FLAG_DATA_DESCRIPTOR)

    @property
    def sizes_known(self) -> bool:
        # Writers that stream set the descriptor flag and zero the header sizes
        return not self.has_descriptor or self.compressed_size > 0


class _ForwardReader:
    """Forward-only reader over a binary stream, with pushback."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pending = b""

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; empty result means end of stream."""
        if self._pending:
            chunk, self._pending = self._pending[:size], self._pending[size:]
            return chunk
        try:
            return self._stream.read(size) or b""
        except OSError as e:
            raise ContainerError(f"Cannot read container stream: {e}") from e

    def read_exact(self, size: int, what: str) -> bytes:
        parts: list[bytes] = []
        remaining = size
        while remaining > 0:
            chunk = self.read(min(remaining, READ_CHUNK_SIZE))
            if not chunk:
                raise ContainerError(f"Truncated container: stream ended inside {what}")
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def skip(self, size: int, what: str) -> None:
        remaining = size
        while remaining > 0:
            chunk = self.read(min(remaining, READ_CHUNK_SIZE))
            if not chunk:
                raise ContainerError(f"Truncated container: stream ended inside {what}")
            remaining -= len(chunk)

    def unread(self, data: bytes) -> None:
        if data:
            self._pending = data + self._pending


def _parse_zip64_sizes(extra: bytes, usize: int, csize: int) -> tuple[int, int]:
    """Replace 0xFFFFFFFF sizes with the values from a Zip64 extra field."""
    pos = 0
    while pos + 4 <= len(extra):
        field_id, field_len = struct.unpack_from("<HH", extra, pos)
        body = extra[pos + 4 : pos + 4 + field_len]
        if field_id == _ZIP64_EXTRA_ID:
            offset = 0
            if usize == _ZIP64_MARKER and offset + 8 <= len(body):
                (usize,) = struct.unpack_from("<Q", body, offset)
                offset += 8
            if csize == _ZIP64_MARKER and offset + 8 <= len(body):
                (csize,) = struct.unpack_from("<Q", body, offset)
            break
        pos += 4 + field_len
    return usize, csize


def _read_local_header(reader: _ForwardReader) -> _LocalHeader:
    fixed = reader.read_exact(_LOCAL_HEADER.size, "a local file header")
    _ver, flags, method, _time, _date, crc, csize, usize, nlen, xlen = _LOCAL_HEADER.unpack(fixed)
    raw_name = reader.read_exact(nlen, "an entry name")
    extra = reader.read_exact(xlen, "an extra field")

    encoding = "utf-8" if flags & _FLAG_UTF8 else "cp437"
    name = raw_name.decode(encoding, errors="replace")

    zip64 = _ZIP64_MARKER in (csize, usize)
    if zip64:
        usize, csize = _parse_zip64_sizes(extra, usize, csize)

    return _LocalHeader(
        name=name,
        flags=flags,
        method=method,
        crc=crc,
        compressed_size=csize,
        uncompressed_size=usize,
        zip64=zip64,
    )


def _inflate(reader: _ForwardReader, header: _LocalHeader, limit: int | None) -> bytes:
    """Inflate one raw-deflate entry body, leaving the stream just past it.

    When the header carries sizes, exactly ``compressed_size`` bytes are
    consumed.  Otherwise the deflate end-of-stream marker ends the entry and
    any over-read bytes are pushed back.  Output is discarded when
    ``limit`` is None (the entry is being skipped).
    """
    decomp = zlib.decompressobj(-zlib.MAX_WBITS)
    remaining = header.compressed_size if header.sizes_known else None
    out = bytearray()
    produced = 0

    while not decomp.eof:
        want = READ_CHUNK_SIZE if remaining is None else min(READ_CHUNK_SIZE, remaining)
        chunk = reader.read(want) if want else b""
        if not chunk:
            raise ContainerError(f"Truncated deflate data in entry {header.name!r}")
        if remaining is not None:
            remaining -= len(chunk)

        buf = chunk
        while True:
            try:
                piece = decomp.decompress(buf, READ_CHUNK_SIZE)
            except zlib.error as e:
                raise ContainerError(f"Corrupt deflate data in entry {header.name!r}: {e}") from e
            produced += len(piece)
            if limit is not None:
                if produced > limit:
                    raise FormatError(f"Entry {header.name!r} exceeds the {limit}-byte size limit")
                out += piece
            buf = decomp.unconsumed_tail
            if decomp.eof or (not buf and len(piece) < READ_CHUNK_SIZE):
                break

    if remaining is None:
        reader.unread(decomp.unused_data)
    elif remaining:
        reader.skip(remaining, f"entry {header.name!r}")
    return bytes(out)


def _read_stored(reader: _ForwardReader, header: _LocalHeader, limit: int | None) -> bytes:
    if limit is not None and header.compressed_size > limit:
        raise FormatError(f"Entry {header.name!r} exceeds the {limit}-byte size limit")
    if limit is None:
        reader.skip(header.compressed_size, f"entry {header.name!r}")
        return b""
    return reader.read_exact(header.compressed_size, f"entry {header.name!r}")


def _read_data_descriptor(reader: _ForwardReader, header: _LocalHeader) -> int:
    """Consume a data descriptor and return its CRC-32."""
    first = reader.read_exact(4, "a data descriptor")
    crc_raw = reader.read_exact(4, "a data descriptor") if first == _DATA_DESCRIPTOR_SIG else first
    reader.skip(16 if header.zip64 else 8, "a data descriptor")
    (crc,) = struct.unpack("<I", crc_raw)
    return crc


def _process_entry(reader: _ForwardReader, header: _LocalHeader, keep: bool, limit: int) -> bytes:
    """Read (``keep``) or skip one entry body plus its data descriptor."""
    if keep and header.flags & _FLAG_ENCRYPTED:
        raise ContainerError(f"Entry {header.name!r} is encrypted")

    effective_limit = limit if keep else None
    if header.method == _METHOD_DEFLATED and not (header.flags & _FLAG_ENCRYPTED):
        data = _inflate(reader, header, effective_limit)
    elif header.sizes_known and (header.method == _METHOD_STORED or not keep):
        data = _read_stored(reader, header, effective_limit)
    elif not header.sizes_known:
        raise ContainerError(
            f"Entry {header.name!r} has no size in its local header and cannot be streamed"
        )
    else:
        raise ContainerError(
            f"Entry {header.name!r} uses unsupported compression method {header.method}"
        )

    crc = _read_data_descriptor(reader, header) if header.has_descriptor else header.crc
    if keep and zlib.crc32(data) != crc:
        raise ContainerError(f"CRC-32 mismatch in entry {header.name!r}")
    return data


def iter_entries(
    stream: BinaryIO,
    names: Collection[str] | None = None,
    *,
    max_entry_size: int = DEFAULT_MAX_ENTRY_SIZE,
) -> Iterator[ExtractedEntry]:
    """
    Yield entries of a ZIP stream in stream order.

    Args:
        stream: Readable binary stream positioned at the start of the archive.
        names: Exact entry names to extract; others are skipped.  ``None``
            extracts every entry.
        max_entry_size: Maximum uncompressed size of an extracted entry.

    Raises:
        ContainerError: If the stream is not a readable ZIP archive.
        FormatError: If an extracted entry exceeds ``max_entry_size``.
    """
    reader = _ForwardReader(stream)
    wanted = None if names is None else frozenset(names)
    count = 0

    while True:
        sig = reader.read(4)
        if len(sig) < 4 and sig:
            sig += reader.read(4 - len(sig))
        if not sig:
            if count == 0:
                raise ContainerError("Empty stream -- not a ZIP archive")
            _logger.debug("Container ended without a central directory after %d entries", count)
            return
        if sig in _TRAILER_SIGS:
            return
        if sig != _LOCAL_HEADER_SIG:
            if count == 0:
                raise ContainerError("Not a ZIP archive (no local file header at start of stream)")
            _logger.warning(
                "Unexpected record %s after %d entries; ignoring the rest of the container",
                sig.hex(),
                count,
            )
            return

        header = _read_local_header(reader)
        count += 1
        keep = wanted is None or header.name in wanted
        data = _process_entry(reader, header, keep, max_entry_size)
        if keep:
            _logger.debug("Extracted %s (%d bytes)", header.name, len(data))
            yield ExtractedEntry(name=header.name, data=data)


def read_container(
    stream: BinaryIO,
    *,
    max_entry_size: int = DEFAULT_MAX_ENTRY_SIZE,
) -> ContainerContents:
    """
    Extract ``content.xml`` and ``sign.sgn`` from a UDF container stream.

    Missing entries are returned as ``None``; a container without
    ``sign.sgn`` is an unsigned document, not an error.  If an entry name
    repeats, the later entry wins.

    Raises:
        ContainerError: If the stream is not a readable ZIP archive.
        FormatError: If an entry exceeds ``max_entry_size``.
    """
    found: dict[str, bytes] = {}
    for entry in iter_entries(
        stream, (CONTENT_ENTRY, SIGNATURE_ENTRY), max_entry_size=max_entry_size
    ):
        if entry.name in found:
            _logger.warning("Duplicate %s entry in container; using the later one", entry.name)
        found[entry.name] = entry.data
    return ContainerContents(
        content=found.get(CONTENT_ENTRY),
        signature=found.get(SIGNATURE_ENTRY),
    )
