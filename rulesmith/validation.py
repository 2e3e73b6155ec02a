"""Lightweight request payload validation utilities.

Provides minimal schema-like checking with clear, consistent error responses
for the preview API. Not a general JSON Schema implementation.

- Return (ok, value_or_error) tuples; the caller decides how to respond.
- ``require`` raises ValidationError instead, for handlers that prefer to let
  the blueprint error handler render a 400.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'number', 'dict'
Extras examples:
  max_len, min_len, allow_empty (str)
  min, max (int / number)
  value_type, max_items (dict values)

Example:
 ok, data_or_err = validate({'levels': 0}, PREVIEW_REQUEST)
 -> (False, {'field': 'levels', 'error': 'must be >= 1', 'code': 'min'})
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'number': (int, float),
    'dict': (dict,),
}


class ValidationError(Exception):
    def __init__(self, field: str, message: str, code: str):
        super().__init__(message)
        self.field = field
        self.message = message
        self.code = code

    def to_dict(self) -> Dict[str, str]:
        return {'field': self.field, 'error': self.message, 'code': self.code}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def _type_ok(value: Any, type_name: str) -> bool:
    # bool is an int subclass; JSON true/false is never a number here
    if isinstance(value, bool) and type_name in ('int', 'number'):
        return False
    return isinstance(value, PRIMITIVES[type_name])


def validate(payload: Any, schema: Dict[str, tuple], prefix: str = '') -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail(prefix.rstrip('.') or '__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        field = f'{prefix}{name}'
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(field, 'missing required field', 'required')
            continue
        value = payload[name]
        if not _type_ok(value, type_name):
            return _fail(field, f'expected {type_name}', 'type')
        if type_name == 'str':
            s = value if extras.get('allow_empty') else value.strip()
            if not extras.get('allow_empty') and len(s) == 0:
                return _fail(field, 'must not be empty', 'empty')
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(field, 'too long', 'max_len')
            if 'min_len' in extras and len(value) < extras['min_len']:
                return _fail(field, 'too short', 'min_len')
            out[name] = s
        elif type_name in ('int', 'number'):
            if 'min' in extras and value < extras['min']:
                return _fail(field, f"must be >= {extras['min']}", 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(field, f"must be <= {extras['max']}", 'max')
            out[name] = value
        elif type_name == 'dict':
            if 'max_items' in extras and len(value) > extras['max_items']:
                return _fail(field, 'too many entries', 'max_items')
            value_type = extras.get('value_type')
            if value_type:
                if value_type not in PRIMITIVES:
                    return _fail('__schema__', f'unsupported value_type {value_type}', 'schema')
                for key, elem in value.items():
                    if not _type_ok(elem, value_type):
                        return _fail(f'{field}.{key}', f'expected {value_type}', 'value_type')
            out[name] = value
    return True, out


def require(payload: Any, schema: Dict[str, tuple], prefix: str = '') -> Dict[str, Any]:
    """Validate ``payload`` or raise ValidationError with the first failure."""
    ok, data = validate(payload, schema, prefix)
    if not ok:
        raise ValidationError(data['field'], data['error'], data['code'])
    return data


# Predefined schemas used by the preview API
CURVE = {
    'kind': ('str', False, {'max_len': 32}),
    'base': ('number', False),
    'factor': ('number', False),
}
PREVIEW_REQUEST = {
    'curve': ('dict', False),
    'formulas': ('dict', False, {'value_type': 'str', 'max_items': 32}),
    'levels': ('int', False, {'min': 1}),
}
VALIDATE_REQUEST = {
    'formulas': ('dict', True, {'value_type': 'str', 'max_items': 32}),
}
