"""Central API error codes and registration helpers."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict

from flask import jsonify
from werkzeug.exceptions import HTTPException

from domains.notifications import (
    ChannelConfigurationError,
    ChannelDeliveryError,
    ChannelDisabledError,
    ChannelUnavailableError,
    UnknownChannelError,
)
from logging_lib import get_logger


logger = get_logger("api.errors")

ERRORS: Dict[str, int] = {
    'MISSING_FIELDS': 400,
    'INVALID_ARGUMENT': 400,
    'VALIDATION_ERROR': 400,
    'AUTH_ERROR': 401,
    'PERMISSION_DENIED': 403,
    'NOT_FOUND': 404,
    'UNKNOWN_CHANNEL': 404,
    'METHOD_NOT_ALLOWED': 405,
    'CHANNEL_DISABLED': 409,
    'CHANNEL_UNAVAILABLE': 409,
    'CHANNEL_NOT_CONFIGURED': 422,
    'DELIVERY_FAILED': 502,
    'DB_ERROR': 500,
    'INTERNAL_ERROR': 500,
}


class ApiError(Exception):
    """Raised by route handlers to produce a coded error response."""

    def __init__(self, message: str, code: str = 'INVALID_ARGUMENT') -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def make_error(message: str, code: str) -> Any:
    """Make an error response."""

    status = ERRORS.get(code, 500)
    return jsonify({'error': message, 'code': code}), status


def register_error_handlers(app) -> None:
    """Register error handlers."""

    @app.errorhandler(ApiError)
    def _h_api(e: ApiError):
        return make_error(e.message, e.code)

    @app.errorhandler(UnknownChannelError)
    def _h_unknown_channel(e: UnknownChannelError):
        return make_error(str(e), 'UNKNOWN_CHANNEL')

    @app.errorhandler(ChannelDisabledError)
    def _h_disabled(e: ChannelDisabledError):
        return make_error(str(e), 'CHANNEL_DISABLED')

    @app.errorhandler(ChannelUnavailableError)
    def _h_unavailable(e: ChannelUnavailableError):
        return make_error(str(e), 'CHANNEL_UNAVAILABLE')

    @app.errorhandler(ChannelConfigurationError)
    def _h_not_configured(e: ChannelConfigurationError):
        return make_error(str(e), 'CHANNEL_NOT_CONFIGURED')

    @app.errorhandler(ChannelDeliveryError)
    def _h_delivery(e: ChannelDeliveryError):
        return make_error(str(e), 'DELIVERY_FAILED')

    @app.errorhandler(404)
    def _h_404(_e):
        """Handle 404 errors."""

        return make_error('Not found', 'NOT_FOUND')

    @app.errorhandler(405)
    def _h_405(_e):
        """Handle 405 errors."""

        return make_error('Method not allowed', 'METHOD_NOT_ALLOWED')

    @app.errorhandler(Exception)
    def _h_exc(e: Exception):
        """Handle all other errors."""

        if isinstance(e, HTTPException):
            return make_error(e.description or e.name, 'INVALID_ARGUMENT' if (e.code or 500) < 500 else 'INTERNAL_ERROR')
        if isinstance(e, KeyError):
            return make_error('Missing required fields', 'MISSING_FIELDS')
        if isinstance(e, ValueError):
            return make_error('Invalid argument', 'INVALID_ARGUMENT')
        if isinstance(e, sqlite3.Error):
            logger.exception("database_error", error=str(e))
            return make_error('Database error', 'DB_ERROR')

        logger.exception("unhandled_error", error=str(e), exception=type(e).__name__)
        return make_error('Internal server error', 'INTERNAL_ERROR')
