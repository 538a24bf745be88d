from dataclasses import dataclass

from marcscan.constants import CONTROL_TAG_PREFIX, LEADER_LENGTH
from marcscan.exceptions import FieldNotFound, InvalidBaseAddress, InvalidLeader


def parse_digits(text: str) -> int | None:
    """Parse a fixed-width run of ASCII digits, or return None."""
    if text.isascii() and text.isdigit():
        return int(text)
    return None


class Leader:
    """The 24 character record header.

    Only the positions which vary between records are exposed by name; any
    other position is reachable with ``leader[i]``.
    """

    __slots__ = ('_value', '_record_length', '_base_address')

    def __init__(self, leader_str: str) -> None:
        if len(leader_str) != LEADER_LENGTH:
            raise InvalidLeader(f"Leader must be {LEADER_LENGTH} characters, got {len(leader_str)}")

        base_address = parse_digits(leader_str[12:17])
        if base_address is None:
            raise InvalidBaseAddress(f"Could not determine record start from {leader_str[12:17]!r}")

        object.__setattr__(self, '_value', leader_str)
        object.__setattr__(self, '_record_length', parse_digits(leader_str[0:5]))
        object.__setattr__(self, '_base_address', base_address)

    def __setattr__(self, name, value):
        raise AttributeError("Leader is immutable")

    @property
    def record_length(self) -> int | None:
        return self._record_length

    @property
    def record_status(self) -> str:
        return self._value[5]

    @property
    def type_of_record(self) -> str:
        return self._value[6]

    @property
    def bibliographic_level(self) -> str:
        return self._value[7]

    @property
    def type_of_control(self) -> str:
        return self._value[8]

    @property
    def char_coding_scheme(self) -> str:
        return self._value[9]

    @property
    def base_address_of_data(self) -> int:
        return self._base_address

    @property
    def directory_length(self) -> int:
        # the byte before the base address terminates the directory
        return self._base_address - LEADER_LENGTH - 1

    @property
    def encoding_level(self) -> str:
        return self._value[17]

    @property
    def descriptive_cataloging_form(self) -> str:
        return self._value[18]

    @property
    def multipart_resource_record_level(self) -> str:
        return self._value[19]

    def __getitem__(self, key: int) -> str:
        return self._value[key]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Leader):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Leader({self._value!r})"

    def __str__(self) -> str:
        return self._value


@dataclass(frozen=True)
class VariableField:
    tag: str

    @property
    def is_control_field(self) -> bool:
        return self.tag.startswith(CONTROL_TAG_PREFIX)


@dataclass(frozen=True)
class ControlField(VariableField):
    value: str

    def __str__(self) -> str:
        return f"{self.tag}  {self.value}"


@dataclass(frozen=True)
class SubField:
    code: str
    value: str

    def __str__(self) -> str:
        return f"${self.code}{self.value}"


@dataclass(frozen=True)
class DataField(VariableField):
    indicator1: str
    indicator2: str
    subfields: tuple[SubField, ...] = ()

    def sub_field(self, *codes: str) -> list[SubField]:
        """Return the subfields whose code is one of ``codes``, in field order."""
        return [subfield for subfield in self.subfields if subfield.code in codes]

    def __getitem__(self, code: str) -> list[SubField]:
        return self.sub_field(code)

    def __contains__(self, code: str) -> bool:
        for subfield in self.subfields:
            if subfield.code == code:
                return True

        return False

    def __str__(self) -> str:
        res = f"{self.tag}  {self.indicator1}{self.indicator2}"
        for subfield in self.subfields:
            res += str(subfield)
        return res


class Record:
    """A decoded MARC record.

    ``fields`` keeps directory order. ``data`` is the exact buffer the record
    was decoded from, without its record terminator, when the reader was asked
    to retain it.
    """

    __slots__ = ('leader', 'fields', 'data')

    def __init__(self, leader: Leader | str, fields=(), data: bytes | None = None) -> None:
        object.__setattr__(self, 'leader', leader if isinstance(leader, Leader) else Leader(leader))
        object.__setattr__(self, 'fields', tuple(fields))
        object.__setattr__(self, 'data', None if data is None else bytes(data))

    def __setattr__(self, name, value):
        raise AttributeError("Record is immutable")

    def __delattr__(self, name):
        raise AttributeError("Record is immutable")

    @property
    def control_fields(self) -> list[ControlField]:
        return [field for field in self.fields if isinstance(field, ControlField)]

    @property
    def data_fields(self) -> list[DataField]:
        return [field for field in self.fields if isinstance(field, DataField)]

    def control_field(self, *tags: str) -> list[ControlField]:
        """Return the control fields for each tag, grouped in the order the tags are given."""
        res = []
        for tag in tags:
            for field in self.fields:
                if isinstance(field, ControlField) and field.tag == tag:
                    res.append(field)
        return res

    def data_field(self, *tags: str) -> list[DataField]:
        """Return the data fields for each tag, grouped in the order the tags are given."""
        res = []
        for tag in tags:
            for field in self.fields:
                if isinstance(field, DataField) and field.tag == tag:
                    res.append(field)
        return res

    def control_number(self) -> str:
        fields = self.control_field('001')
        if not fields:
            raise FieldNotFound('001')
        return fields[0].value.strip()

    def filter(self, *queries: str) -> list[list[str]]:
        """Evaluate filter queries such as ``"245ac"`` or ``"650|*0|x"``.

        See :func:`marcscan.query.filter_record`.
        """
        from marcscan.query import filter_record
        return filter_record(self, *queries)

    def filter_by_query(self, *queries: str) -> list[list[list[str]]]:
        from marcscan.query import filter_record_by_query
        return filter_record_by_query(self, *queries)

    def __getitem__(self, tag: str) -> list[ControlField | DataField]:
        return [field for field in self.fields if field.tag == tag]

    def __contains__(self, tag: str) -> bool:
        for field in self.fields:
            if field.tag == tag:
                return True

        return False

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)

    def __str__(self) -> str:
        res = f"=LDR  {self.leader}"
        for field in self.fields:
            res += f"\n={field}"
        return res
