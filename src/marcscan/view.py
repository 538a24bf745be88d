import json

import yaml

from marcscan.marc import ControlField, Record

BLANK = '\\'


def _blanks(value: str) -> str:
    return value.replace(' ', BLANK)


def format_record_as_text_view(record: Record) -> str:
    res = f"=LDR  {_blanks(str(record.leader))}"
    for field in record.fields:
        if isinstance(field, ControlField):
            res += f"\n={field.tag}  {_blanks(field.value)}"
        else:
            res += f"\n={field.tag}  {_blanks(field.indicator1)}{_blanks(field.indicator2)}"
            for subfield in field.subfields:
                res += f"${subfield.code}{subfield.value}"
    return res


def record_to_dict(record: Record) -> dict:
    obj = {
        'leader': str(record.leader),
        'fields': []
    }

    for field in record.fields:
        if isinstance(field, ControlField):
            obj['fields'].append({
                field.tag: field.value
            })
            continue

        field_obj = {'ind1': field.indicator1, 'ind2': field.indicator2, 'subfields': []}

        for subfield in field.subfields:
            field_obj['subfields'].append({
                subfield.code: subfield.value
            })

        obj['fields'].append({
            field.tag: field_obj
        })

    return obj


def to_yaml(obj, indent: int | None = None) -> str:
    return yaml.dump(obj, indent=indent, sort_keys=False, allow_unicode=True, explicit_start=True)


def to_json(obj, indent: int | None = None) -> str:
    return json.dumps(obj, indent=indent, ensure_ascii=False) + "\n"
