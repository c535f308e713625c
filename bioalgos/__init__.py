import logging
import os

from logging.handlers import RotatingFileHandler

from dotenv import load_dotenv
from flask import Flask, jsonify

from bioalgos.config import get_config
from bioalgos.extensions import db, migrate

__version__ = '0.2.0'

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def load_environment(config_name=None):
    """Load ``.env.<env>`` then ``.env`` from the project root.

    Returns the resolved configuration name.
    """
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    env_file = os.path.join(_PROJECT_ROOT, f'.env.{env}')
    if os.path.exists(env_file):
        load_dotenv(env_file)

    # A local .env overrides the environment-specific one
    dotenv_path = os.path.join(_PROJECT_ROOT, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path, override=True)

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    return config_name


def create_app(config_name=None):
    """Application factory for the BioAlgos REST backend.

    Args:
        config_name: Configuration name ('development', 'production' or
                     'testing'). Defaults to FLASK_ENV or 'development'.

    Returns:
        Configured Flask application instance.
    """
    config_name = load_environment(config_name)

    app = Flask(__name__)

    app.config.from_object(get_config(config_name))

    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)

    _register_blueprints(app)

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({'error': 'Method not allowed'}), 405

    with app.app_context():
        db.create_all()

    app.logger.info(f'BioAlgos API {__version__} started ({config_name})')
    return app


def _configure_logging(app):
    """Set up RotatingFileHandler on the root logger."""
    max_bytes = app.config.get('LOG_FILE_MAX_BYTES', 0)
    if not max_bytes:
        return

    log_dir = os.path.join(app.instance_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(log_dir, 'app.log')
    handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=app.config.get('LOG_FILE_BACKUP_COUNT', 3),
    )
    handler.setFormatter(logging.Formatter(
        app.config.get('LOG_FORMAT', '%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    ))
    handler.setLevel(logging.DEBUG)

    root = logging.getLogger()
    root.addHandler(handler)
    if root.level == logging.WARNING:
        root.setLevel(logging.DEBUG)


def _register_blueprints(app):
    """Register all application blueprints."""
    from bioalgos.views.api import api_bp

    app.register_blueprint(api_bp)
