"""
project: Rulesmith
module: preview_api.py
License: MIT

Progression preview API endpoints (defaults, table preview, formula checks).

The editing surface posts the current curve and formulas on every change and
renders the rows it gets back. Formula failures never fail the request; they
show up per cell under each row's ``errors`` map.
"""
from flask import Blueprint, current_app, jsonify, request

from rulesmith.config import DEFAULT_CURVE, DEFAULT_FORMULAS, Settings
from rulesmith.formula import validate_formula
from rulesmith.models import STAT_NAMES, CurveConfig, CurveKind, FormulaSet, table_to_dicts
from rulesmith.services.table_service import get_cached_table
from rulesmith.validation import CURVE, PREVIEW_REQUEST, VALIDATE_REQUEST, ValidationError, require

bp_preview = Blueprint('preview', __name__)


@bp_preview.errorhandler(ValidationError)
def _validation_error(e):
    return jsonify(e.to_dict()), 400


def _settings() -> Settings:
    cfg = current_app.config
    return Settings(
        default_levels=cfg.get('RULESMITH_DEFAULT_LEVELS', Settings.default_levels),
        max_levels=cfg.get('RULESMITH_MAX_LEVELS', Settings.max_levels),
        table_cache_max=cfg.get('RULESMITH_TABLE_CACHE_MAX', Settings.table_cache_max),
        disable_cache=cfg.get('RULESMITH_DISABLE_CACHE', Settings.disable_cache),
    )


def _curve_from_payload(raw) -> CurveConfig:
    if raw is None:
        return DEFAULT_CURVE
    data = require(raw, CURVE, prefix='curve.')
    kind = DEFAULT_CURVE.kind
    if 'kind' in data:
        try:
            kind = CurveKind.parse(data['kind'])
        except ValueError as e:
            raise ValidationError('curve.kind', str(e), 'choice') from None
    return CurveConfig(
        kind=kind,
        base=data.get('base', DEFAULT_CURVE.base),
        factor=data.get('factor', DEFAULT_CURVE.factor),
    )


def _payload():
    data = request.get_json(silent=True)
    if data is None:
        # An empty body means "use every default"
        if not request.get_data():
            return {}
        raise ValidationError('__root__', 'body must be JSON', 'json')
    return data


@bp_preview.route('/api/progression/defaults')
def api_defaults():
    """
    Return the starting curve, formulas and the choices an editor can offer.
    Response: { 'curve': {...}, 'formulas': {...}, 'levels': 20,
                'curve_kinds': [{'value': 'linear', 'label': 'Linear (Slow)'}, ...],
                'stats': ['STR', ...], 'max_levels': 100 }
    """
    settings = _settings()
    return jsonify({
        'curve': {
            'kind': DEFAULT_CURVE.kind.value,
            'base': DEFAULT_CURVE.base,
            'factor': DEFAULT_CURVE.factor,
        },
        'formulas': DEFAULT_FORMULAS.to_dict(),
        'levels': settings.default_levels,
        'max_levels': settings.max_levels,
        'curve_kinds': [{'value': k.value, 'label': k.label} for k in CurveKind],
        'stats': list(STAT_NAMES),
    })


@bp_preview.route('/api/progression/preview', methods=['POST'])
def api_preview():
    """Build the progression preview table.

    Body JSON (all optional, defaults fill the gaps):
      { "curve": {"kind": "quadratic", "base": 100, "factor": 1.5},
        "formulas": {"hp": "VIT * 10 + 50"}, "levels": 20 }

    Response: { "level_count": n, "rows": [ {"level", "xp_needed", "xp_total",
                "derived": {name: number}, "errors": {name: code}}, ... ] }
    """
    settings = _settings()
    data = require(_payload(), PREVIEW_REQUEST)
    curve = _curve_from_payload(data.get('curve'))
    formulas = FormulaSet.from_mapping(data['formulas']) if 'formulas' in data else DEFAULT_FORMULAS
    levels = data.get('levels', settings.default_levels)
    if levels > settings.max_levels:
        raise ValidationError('levels', f'must be <= {settings.max_levels}', 'max')
    rows = get_cached_table(curve, formulas, levels, settings=settings)
    return jsonify({'level_count': len(rows), 'rows': table_to_dicts(rows)})


@bp_preview.route('/api/progression/validate', methods=['POST'])
def api_validate():
    """Check formulas for syntax problems without building a table.

    Body JSON: { "formulas": {name: expr, ...} }
    Response: { "results": {name: {"ok": bool, "error": code|null}} }
    """
    data = require(_payload(), VALIDATE_REQUEST)
    results = {}
    for name, expr in data['formulas'].items():
        err = validate_formula(expr)
        results[name] = {'ok': err is None, 'error': err.code if err else None}
    return jsonify({'results': results})
