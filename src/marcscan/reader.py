import logging
from typing import BinaryIO, Iterator

from marcscan.constants import (
    CONTROL_TAG_PREFIX,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_ENCODING,
    DEFAULT_ERRORS,
    DIRECTORY_ENTRY_LENGTH,
    LEADER_LENGTH,
    RT,
    US,
)
from marcscan.exceptions import (
    DecodeError,
    EmptySubfield,
    FieldOutOfBounds,
    InvalidBaseAddress,
    InvalidFieldLength,
    InvalidFieldStart,
    InvalidFieldText,
    InvalidIndicators,
    InvalidLeader,
    MalformedDirectory,
)
from marcscan.marc import ControlField, DataField, Leader, Record, SubField, parse_digits

logger = logging.getLogger(__name__)


def iter_record_buffers(f: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Split a binary stream into record buffers.

    Each buffer holds the bytes of one record up to, but excluding, the record
    terminator. Bytes left over after the last terminator are yielded as a
    final, possibly truncated, buffer. Errors raised by ``f.read`` end the
    iteration.
    """
    pending = bytearray()
    offset = 0

    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            break

        pending.extend(chunk)
        while True:
            end = pending.find(RT, offset)
            if end < 0:
                offset = len(pending)
                break

            yield bytes(pending[:end])
            del pending[:end + 1]
            offset = 0

    if pending:
        logger.debug("Stream ended with %d unterminated bytes", len(pending))
        yield bytes(pending)


def parse_leader(buf: bytes) -> Leader:
    if len(buf) < LEADER_LENGTH:
        raise InvalidLeader(f"Record of {len(buf)} bytes is too short to hold a leader")

    leader = Leader(buf[:LEADER_LENGTH].decode('iso-8859-1'))

    base_address = leader.base_address_of_data
    if base_address <= LEADER_LENGTH or base_address > len(buf):
        raise InvalidBaseAddress(f"Base address {base_address} outside of record of {len(buf)} bytes")

    return leader


def parse_directory(directory: bytes) -> list[tuple[str, int, int]]:
    """Decode directory entries into ``(tag, length, start)`` tuples."""
    if len(directory) % DIRECTORY_ENTRY_LENGTH != 0:
        raise MalformedDirectory(
            f"Directory of {len(directory)} bytes is not a multiple of {DIRECTORY_ENTRY_LENGTH}"
        )

    entries = []
    for offset in range(0, len(directory), DIRECTORY_ENTRY_LENGTH):
        entry = directory[offset:offset + DIRECTORY_ENTRY_LENGTH].decode('iso-8859-1')
        tag = entry[0:3]

        length = parse_digits(entry[3:7])
        if length is None or length < 1:
            raise InvalidFieldLength("Could not determine length of field", tag)

        start = parse_digits(entry[7:12])
        if start is None:
            raise InvalidFieldStart("Could not determine field start", tag)

        entries.append((tag, length, start))

    return entries


def decode_text(raw: bytes, tag: str, encoding: str = DEFAULT_ENCODING, errors: str = DEFAULT_ERRORS) -> str:
    try:
        return raw.decode(encoding, errors)
    except UnicodeDecodeError as e:
        raise InvalidFieldText(f"Could not decode field text as {encoding}: {e.reason}", tag) from e


def parse_data_field(tag: str, content: bytes, encoding: str = DEFAULT_ENCODING,
                     errors: str = DEFAULT_ERRORS) -> DataField:
    # indicators, then the delimiter which opens the first subfield
    if len(content) <= 2:
        raise InvalidIndicators("Invalid indicators detected", tag)

    subfields = []
    for chunk in content[3:].split(US):
        if not chunk:
            raise EmptySubfield("Extraneous subfield delimiter", tag)

        subfields.append(SubField(decode_text(chunk[:1], tag, encoding, errors),
                                  decode_text(chunk[1:], tag, encoding, errors)))

    return DataField(
        tag,
        decode_text(content[0:1], tag, encoding, errors),
        decode_text(content[1:2], tag, encoding, errors),
        tuple(subfields),
    )


def decode_record(buf: bytes, encoding: str = DEFAULT_ENCODING, errors: str = DEFAULT_ERRORS,
                  retain_raw: bool = True) -> Record:
    """Decode one record buffer, as produced by :func:`iter_record_buffers`.

    Raises a :class:`DecodeError` subclass if any part of the record is
    malformed; no partially decoded record is ever returned.
    """
    buf = bytes(buf)
    leader = parse_leader(buf)

    base_address = leader.base_address_of_data
    data = memoryview(buf)[base_address:]

    fields = []
    for tag, length, start in parse_directory(buf[LEADER_LENGTH:base_address - 1]):
        if start + length > len(data):
            raise FieldOutOfBounds(
                f"Field of {length} bytes at {start} exceeds data of {len(data)} bytes", tag
            )

        # length counts the field terminator
        content = bytes(data[start:start + length - 1])

        if tag.startswith(CONTROL_TAG_PREFIX):
            fields.append(ControlField(tag, decode_text(content, tag, encoding, errors)))
        else:
            fields.append(parse_data_field(tag, content, encoding, errors))

    return Record(leader, fields, data=buf if retain_raw else None)


class MarcStreamReader:
    """Iterate over the records of a binary MARC 21 stream.

    Records are framed lazily, so only one record is held in memory at a time.
    When ``permissive`` is set, records which fail to decode are logged and
    skipped instead of ending the iteration.
    """

    def __init__(self, f: BinaryIO, encoding: str = DEFAULT_ENCODING, errors: str = DEFAULT_ERRORS,
                 retain_raw: bool = True, permissive: bool = False,
                 chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.encoding = encoding
        self.errors = errors
        self.retain_raw = retain_raw
        self.permissive = permissive
        self.__buffers = iter_record_buffers(f, chunk_size)
        self.records_read = 0
        self.current_buffer: bytes | None = None
        self.current_exception: DecodeError | None = None

    def read_next(self) -> Record | None:
        """Return the next record, or None once the stream is exhausted.

        A DecodeError only concerns the record just read; calling ``read_next``
        again continues with the following record.
        """
        buf = next(self.__buffers, None)
        if buf is None:
            return None

        self.records_read += 1
        self.current_buffer = buf
        self.current_exception = None

        try:
            return decode_record(buf, self.encoding, self.errors, self.retain_raw)
        except DecodeError as e:
            self.current_exception = e
            raise

    def __iter__(self) -> Iterator[Record]:
        while True:
            try:
                record = self.read_next()
            except DecodeError as e:
                if not self.permissive:
                    raise
                logger.warning("Skipping record %d: %s", self.records_read, e)
                continue

            if record is None:
                return
            yield record


def read_marc_file(path, **options) -> Iterator[Record]:
    with open(path, 'rb') as f:
        yield from MarcStreamReader(f, **options)
