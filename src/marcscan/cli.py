"""marcscan - utilities for working with MARC 21 files."""
import codecs
import logging

import click

from marcscan.constants import DEFAULT_ENCODING, RT
from marcscan.exceptions import DecodeError, FieldNotFound, InvalidQuery
from marcscan.query import parse_query
from marcscan.reader import MarcStreamReader
from marcscan.view import format_record_as_text_view, record_to_dict, to_json, to_yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def validate_encoding(ctx, param, value: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError:
        raise click.BadParameter(f"Unknown encoding {value!r}")
    return value


encoding_option = click.option('--encoding', default=DEFAULT_ENCODING, show_default=True,
                               callback=validate_encoding,
                               help="Codec used to decode field text.")
strict_option = click.option('--strict', is_flag=True,
                             help="Stop at the first record which fails to decode.")


@click.group()
@click.option('-v', '--verbose', count=True, help="Increase logging output (repeatable).")
def main(verbose: int) -> None:
    """Utilities for working with MARC 21 files."""
    logging.basicConfig(
        level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument('control_number')
@click.argument('file', type=click.File('rb'))
@encoding_option
def pick(control_number: str, file, encoding: str) -> None:
    """Write the record with CONTROL_NUMBER from FILE to stdout, byte for byte."""
    reader = MarcStreamReader(file, encoding=encoding, retain_raw=True, permissive=True)
    for record in reader:
        try:
            if record.control_number() != control_number:
                continue
        except FieldNotFound:
            logger.info("Record %d has no control number", reader.records_read)
            continue

        click.echo(record.data + RT, nl=False)
        return

    raise click.ClickException(f"No record with control number {control_number}")


@main.command(name='filter')
@click.argument('file', type=click.File('rb'))
@click.argument('queries', nargs=-1, required=True)
@click.option('--format', 'output_format', type=click.Choice(['yaml', 'json']), default='yaml',
              show_default=True)
@click.option('--by-query', is_flag=True, help="Keep one result slot per query.")
@encoding_option
@strict_option
def filter_command(file, queries, output_format: str, by_query: bool, encoding: str, strict: bool) -> None:
    """Print the values selected by QUERIES for every record in FILE.

    Queries look like 245ac, 100 or 650|*0|x.
    """
    try:
        parsed = [parse_query(query) for query in queries]
    except InvalidQuery as e:
        raise click.BadParameter(str(e), param_hint='QUERIES')

    reader = MarcStreamReader(file, encoding=encoding, retain_raw=False, permissive=not strict)
    try:
        for record in reader:
            if by_query:
                res = record.filter_by_query(*parsed)
            else:
                res = record.filter(*parsed)

            click.echo(to_json(res) if output_format == 'json' else to_yaml(res), nl=False)
    except DecodeError as e:
        raise click.ClickException(f"Record {reader.records_read}: {e}")


@main.command()
@click.argument('file', type=click.File('rb'))
@click.option('--format', 'output_format', type=click.Choice(['text', 'yaml', 'json']), default='text',
              show_default=True)
@click.option('--limit', type=click.IntRange(min=1), default=None, help="Stop after this many records.")
@encoding_option
@strict_option
def show(file, output_format: str, limit: int | None, encoding: str, strict: bool) -> None:
    """Print the records in FILE."""
    reader = MarcStreamReader(file, encoding=encoding, retain_raw=False, permissive=not strict)
    count = 0
    try:
        for record in reader:
            if output_format == 'text':
                click.echo(format_record_as_text_view(record) + "\n")
            elif output_format == 'json':
                click.echo(to_json(record_to_dict(record)), nl=False)
            else:
                click.echo(to_yaml(record_to_dict(record)), nl=False)

            count += 1
            if limit is not None and count >= limit:
                break
    except DecodeError as e:
        raise click.ClickException(f"Record {reader.records_read}: {e}")


if __name__ == '__main__':
    main()
