"""
Flask web application serving bracket render plans.
"""
import os
import logging
import yaml
from flask import Flask, request, jsonify

from bracket_viewer import lang
from bracket_viewer.config import Config, load_config
from bracket_viewer.errors import BracketViewerError, ConfigurationError
from bracket_viewer.viewer import BracketsViewer

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
CONFIG_FILE = os.environ.get('VIEWER_CONFIG_FILE')
LOCALES_DIR = os.environ.get('VIEWER_LOCALES_DIR', os.path.join(BASE_DIR, 'locales'))
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MB
YAML_CONTENT_TYPES = {'application/yaml', 'application/x-yaml', 'text/yaml', 'text/x-yaml'}

app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE


def load_default_config() -> Config:
    """Load the viewer defaults from VIEWER_CONFIG_FILE, if set."""
    if not CONFIG_FILE:
        return Config()
    try:
        return load_config(CONFIG_FILE)
    except (OSError, yaml.YAMLError, BracketViewerError) as e:
        app.logger.warning(f'Failed to load {CONFIG_FILE}: {e}')
        return Config()


def load_locales(locales_dir: str) -> list:
    """Register every <name>.yaml bundle found in locales_dir."""
    loaded = []
    if not os.path.isdir(locales_dir):
        return loaded
    for filename in sorted(os.listdir(locales_dir)):
        name, ext = os.path.splitext(filename)
        if ext not in ('.yaml', '.yml'):
            continue
        try:
            lang.load_locale(name, os.path.join(locales_dir, filename))
            loaded.append(name)
        except (OSError, yaml.YAMLError, ConfigurationError) as e:
            app.logger.warning(f'Failed to parse locale {filename}: {e}')
    return loaded


default_config = load_default_config()
load_locales(LOCALES_DIR)


def _read_payload():
    """Parse the request body as JSON, or YAML when sent with a YAML content type."""
    if request.mimetype in YAML_CONTENT_TYPES:
        return yaml.safe_load(request.get_data(as_text=True))
    return request.get_json(silent=True)


@app.route('/api/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok', 'language': default_config.language or lang.get_language()})


@app.route('/api/render', methods=['POST'])
def api_render():
    """Build the render plan of the posted tournament data."""
    try:
        payload = _read_payload()
    except yaml.YAMLError as e:
        app.logger.warning(f'Rejected render request with invalid YAML: {e}')
        return jsonify({'error': f'Error parsing YAML: {e}'}), 400

    if not isinstance(payload, dict):
        return jsonify({'error': 'Request body must be a JSON or YAML object.'}), 400

    data = payload.get('data', payload)
    if not isinstance(data, dict):
        return jsonify({'error': 'data must be an object.'}), 400
    options = payload.get('config')
    if options is not None and not isinstance(options, dict):
        return jsonify({'error': 'config must be an object.'}), 400

    viewer = BracketsViewer()
    if data.get('participant_images') or data.get('participantImages'):
        viewer.set_participant_images(data.get('participant_images') or data.get('participantImages'))

    try:
        config = default_config.merge(options)
        session = viewer.render(data, config)
    except BracketViewerError as e:
        app.logger.warning(f'Render failed: {e}')
        partial = viewer.session.to_dict() if viewer.session else None
        return jsonify({'error': str(e), 'partial': partial}), 400
    except (KeyError, TypeError, ValueError) as e:
        app.logger.warning(f'Malformed tournament data: {e!r}')
        return jsonify({'error': f'Malformed tournament data: {e}'}), 400

    return jsonify(session.to_dict())


@app.route('/api/locales', methods=['GET'])
def api_locales():
    return jsonify({'locales': lang.get_locales(), 'active': default_config.language or lang.get_language()})


@app.route('/api/locales/<name>', methods=['POST'])
def api_add_locale(name):
    """Register a locale bundle. Renders pick it with the 'language' config option."""
    try:
        bundle = _read_payload()
    except yaml.YAMLError as e:
        return jsonify({'error': f'Error parsing YAML: {e}'}), 400

    try:
        lang.add_locale(name, bundle)
    except ConfigurationError as e:
        app.logger.warning(f'Rejected locale {name}: {e}')
        return jsonify({'success': False, 'error': str(e)}), 400

    return jsonify({'success': True, 'locales': lang.get_locales()})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
