"""Compact filter queries over decoded records.

A query is a three character tag, optionally followed by an indicator
segment and a run of subfield codes::

    245         every subfield of every 245
    245ac       subfields a and c of every 245
    650|*0|x    subfield x of every 650 whose second indicator is 0

``*`` matches any indicator. Control fields always yield their whole value;
indicators and subfield codes do not apply to them.
"""
import re
from dataclasses import dataclass

from marcscan.exceptions import InvalidQuery
from marcscan.marc import ControlField, DataField, Record

WILDCARD = '*'

_QUERY_RE = re.compile(r'(?P<tag>[^|]{3})(?:\|(?P<ind1>.)(?P<ind2>.)\|)?(?P<codes>[^|]*)', re.DOTALL)


@dataclass(frozen=True)
class Query:
    tag: str
    indicator1: str = WILDCARD
    indicator2: str = WILDCARD
    codes: str = ''

    def matches(self, field: ControlField | DataField) -> bool:
        if field.tag != self.tag:
            return False
        if isinstance(field, ControlField):
            return True
        return (self.indicator1 in (WILDCARD, field.indicator1)
                and self.indicator2 in (WILDCARD, field.indicator2))

    def select(self, field: ControlField | DataField) -> list[str] | None:
        """Return the values this query picks from ``field``, or None for no match."""
        if not self.matches(field):
            return None

        if isinstance(field, ControlField):
            return [field.value]

        if self.codes:
            values = [subfield.value for subfield in field.sub_field(*self.codes)]
        else:
            values = [subfield.value for subfield in field.subfields]

        return values if values else None


def parse_query(text: str) -> Query:
    match = _QUERY_RE.fullmatch(text)
    if match is None:
        raise InvalidQuery(f"Invalid filter query {text!r}")

    return Query(
        match['tag'],
        match['ind1'] or WILDCARD,
        match['ind2'] or WILDCARD,
        match['codes'],
    )


def _select_groups(record: Record, query: Query) -> list[list[str]]:
    groups = []
    for field in record.fields:
        values = query.select(field)
        if values is not None:
            groups.append(values)
    return groups


def filter_record(record: Record, *queries: str | Query) -> list[list[str]]:
    """Return one group of values per matching field, query by query.

    Groups are ordered by query first and by field position second. Queries
    which match nothing contribute nothing.
    """
    res = []
    for query in queries:
        if not isinstance(query, Query):
            query = parse_query(query)
        res.extend(_select_groups(record, query))
    return res


def filter_record_by_query(record: Record, *queries: str | Query) -> list[list[list[str]]]:
    """Like :func:`filter_record` but keeps one slot per query, empty when it matched nothing."""
    res = []
    for query in queries:
        if not isinstance(query, Query):
            query = parse_query(query)
        res.append(_select_groups(record, query))
    return res
