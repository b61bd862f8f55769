"""
Voter Desk - voter roll lookup and data-entry web application
"""

import os
from pathlib import Path

from flask import Flask

from voter_desk.shared.date_utils import parse_reference_date


PACKAGE_ROOT = Path(__file__).parent

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


class Config:
    """Configuration class for Flask app with required environment variables"""

    def __init__(self):
        # Flask configuration
        self.secret_key = self._require_env('SECRET_KEY')

        # Local roll store database
        self.sqlalchemy_database_uri = self._require_env('DATABASE_URL')
        self.sqlalchemy_track_modifications = False

        # Remote roll store (scripting web-app endpoint)
        self.gateway_url = self._require_env('GATEWAY_URL')
        self.gateway_timeout = float(os.environ.get('GATEWAY_TIMEOUT', '30'))

        # Roll rules
        self.age_reference_date = parse_reference_date(os.environ.get('AGE_REFERENCE_DATE'))
        self.code_search_prefix = os.environ.get('CODE_SEARCH_PREFIX', 'SUR')

        # Photo intake
        self.image_max_width = int(os.environ.get('IMAGE_MAX_WIDTH', '600'))
        self.image_jpeg_quality = int(os.environ.get('IMAGE_JPEG_QUALITY', '70'))
        self.image_char_limit = int(os.environ.get('IMAGE_CHAR_LIMIT', '50000'))

        # Document field extraction
        self.ocr_enabled = os.environ.get('OCR_ENABLED', 'true').strip().lower() in _TRUE_VALUES
        self.ocr_languages = os.environ.get('OCR_LANGUAGES', 'eng+hin')

    def _require_env(self, var_name: str) -> str:
        """Require environment variable or raise error"""
        value = os.environ.get(var_name)
        if not value:
            raise RuntimeError(f"Required environment variable {var_name} is not set")
        return value


def create_app(config=None):
    """Application factory"""
    from voter_desk.blueprints.desk import desk
    from voter_desk.blueprints.script import script
    from voter_desk.commands import register_commands
    from voter_desk.database import init_app as init_database
    from voter_desk.error_handlers import register_error_handlers
    from voter_desk.services.desk_service import DeskRegistry

    app = Flask(__name__)

    if config is None:
        config = Config()

    app.config['SECRET_KEY'] = config.secret_key
    app.config['SQLALCHEMY_DATABASE_URI'] = config.sqlalchemy_database_uri
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = config.sqlalchemy_track_modifications
    app.config['GATEWAY_URL'] = config.gateway_url
    app.config['GATEWAY_TIMEOUT'] = config.gateway_timeout
    app.config['AGE_REFERENCE_DATE'] = config.age_reference_date
    app.config['CODE_SEARCH_PREFIX'] = config.code_search_prefix
    app.config['IMAGE_MAX_WIDTH'] = config.image_max_width
    app.config['IMAGE_JPEG_QUALITY'] = config.image_jpeg_quality
    app.config['IMAGE_CHAR_LIMIT'] = config.image_char_limit
    app.config['OCR_ENABLED'] = config.ocr_enabled
    app.config['OCR_LANGUAGES'] = config.ocr_languages
    if getattr(config, 'testing', False):
        app.config['TESTING'] = True

    app.static_folder = str(PACKAGE_ROOT / 'static')

    # One desk session per operator cookie
    app.extensions['voter_desk'] = DeskRegistry()

    app.register_blueprint(desk)
    app.register_blueprint(script)

    init_database(app)
    register_error_handlers(app)
    register_commands(app)

    return app
