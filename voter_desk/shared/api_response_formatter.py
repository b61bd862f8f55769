"""
Response formatting for the scripting endpoint wire contract
"""

from typing import Any

from flask import jsonify


class APIResponseFormatter:
    """Format `{success, data?, error?}` responses consistently"""

    @staticmethod
    def success(data: Any = None, message: str = "", status_code: int = 200) -> tuple:
        """Format a successful response"""
        response = {
            'success': True,
            'message': message
        }

        if data is not None:
            if isinstance(data, dict):
                response.update(data)
            else:
                response['data'] = data

        return jsonify(response), status_code

    @staticmethod
    def error(error_message: str, status_code: int = 200, details: dict | None = None) -> tuple:
        """Format an error response

        The scripting endpoint reports failures in the body, so the status
        code stays 200 unless the caller asks otherwise.
        """
        response = {
            'success': False,
            'error': error_message
        }

        if details:
            response['details'] = details

        return jsonify(response), status_code
