from marcscan.exceptions import (
    DecodeError,
    EmptySubfield,
    FieldNotFound,
    FieldOutOfBounds,
    InvalidBaseAddress,
    InvalidFieldLength,
    InvalidFieldStart,
    InvalidFieldText,
    InvalidIndicators,
    InvalidLeader,
    InvalidQuery,
    MalformedDirectory,
    MarcError,
)
from marcscan.marc import ControlField, DataField, Leader, Record, SubField
from marcscan.query import Query, filter_record, filter_record_by_query, parse_query
from marcscan.reader import MarcStreamReader, decode_record, iter_record_buffers, read_marc_file

__version__ = "0.1.0"
