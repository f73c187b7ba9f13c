#!/usr/bin/env python
"""Bearer-token authentication wired through Flask-Login."""

from __future__ import annotations

from flask import jsonify, request
from flask_login import LoginManager

from .tokens import TokenIssuer, bearer_token_from_header

login_manager = LoginManager()
login_manager.login_message = None


def init_auth(app, account_service):
    """Attach Flask-Login to the app, resolving users from Authorization headers."""
    login_manager.init_app(app)
    app.extensions['account_service'] = account_service

    @login_manager.request_loader
    def load_user_from_request(req):
        token = bearer_token_from_header(req.headers.get("Authorization"))
        if not token:
            return None
        return account_service.resolve_token(token)

    @login_manager.unauthorized_handler
    def _unauthorized():
        app.logger.info("Rejected unauthenticated request to %s", request.path)
        return jsonify({"error": "authentication_required"}), 401

    return login_manager


__all__ = ["login_manager", "init_auth", "TokenIssuer", "bearer_token_from_header"]
