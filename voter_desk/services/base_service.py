"""
Base service class providing common functionality for all services
"""
from flask import current_app

from voter_desk.shared.logging_config import get_project_logger


class BaseService:
    """Base class for all services providing common functionality"""

    def __init__(self):
        self.logger = get_project_logger(self.__class__.__module__)

    def config_value(self, key: str, default=None):
        """Read a setting from the Flask config, or the default outside an app context"""
        try:
            return current_app.config.get(key, default)
        except RuntimeError:
            return default
