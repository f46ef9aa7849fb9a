"""
Flask web application serving bracket layouts.
"""
import threading

from flask import Flask, jsonify, request

from bracket_layout.layout import BracketLayoutEngine
from bracket_layout.settings import configure_logging, load_settings

app = Flask(__name__)

SETTINGS = load_settings()
configure_logging(SETTINGS['log_level'])
app.logger.setLevel(SETTINGS['log_level'])

DEFAULT_VIEW = 'default'

# One engine (and so one calculation cache) per bracket view
_engines = {}
_engines_lock = threading.Lock()


def get_engine(view: str = DEFAULT_VIEW) -> BracketLayoutEngine:
    """Return the layout engine for a bracket view, creating it on first use."""
    with _engines_lock:
        engine = _engines.get(view)
        if engine is None:
            engine = BracketLayoutEngine(SETTINGS)
            _engines[view] = engine
        return engine


def reset_engines():
    """Drop every view's engine and cache."""
    with _engines_lock:
        _engines.clear()


def _view_name(data: dict) -> str:
    view = data.get('view') or request.args.get('view') or DEFAULT_VIEW
    return str(view)


def _json_body():
    """Parsed JSON object from the request, or None when the body is not one."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


@app.route('/api/health', methods=['GET'])
def api_health():
    with _engines_lock:
        views = sorted(_engines)
    return jsonify({'success': True, 'views': views})


@app.route('/api/bracket/layout', methods=['POST'])
def api_bracket_layout():
    """Compute positions, connectors and scaling for a list of matches."""
    data = _json_body()
    if data is None:
        return jsonify({'success': False, 'error': 'Request body must be a JSON object.'}), 400

    engine = get_engine(_view_name(data))
    result = engine.layout(data.get('matches'), data.get('container'))

    if result.errors:
        app.logger.warning(f'Layout for view {_view_name(data)!r} reported errors: {result.errors}')
    if not result.ok:
        app.logger.info(f'Empty layout for view {_view_name(data)!r}: {result.warnings}')

    payload = result.to_dict()
    payload['success'] = True
    return jsonify(payload)


@app.route('/api/bracket/validate', methods=['POST'])
def api_bracket_validate():
    """Validate match records without laying them out."""
    data = _json_body()
    if data is None:
        return jsonify({'success': False, 'error': 'Request body must be a JSON object.'}), 400

    validation = get_engine(_view_name(data)).validate(data.get('matches'))
    payload = validation.to_dict()
    payload['success'] = True
    return jsonify(payload)


@app.route('/api/bracket/cache/clear', methods=['POST'])
def api_clear_cache():
    """Clear a view's calculation cache, e.g. when the tournament changes."""
    data = _json_body() or {}
    view = _view_name(data)
    with _engines_lock:
        engine = _engines.get(view)
    if engine is None:
        return jsonify({'success': True, 'cleared': 0})

    cleared = engine.cache_size()
    engine.clear_cache()
    app.logger.info(f'Cleared {cleared} cached calculations for view {view!r}')
    return jsonify({'success': True, 'cleared': cleared})


if __name__ == '__main__':
    app.run(debug=True)
