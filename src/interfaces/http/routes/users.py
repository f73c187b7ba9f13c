#!/usr/bin/env python
"""Account API endpoints: signup, login and bearer-token validation."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from src.core.errors import AuthError, ConflictError, ValidationError
from src.observability.metrics import record_login, record_signup, record_token_validation


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


def _accounts():
    return current_app.extensions["account_service"]


@users_bp.route("/signup", methods=["POST"])
def signup():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        user_id = _accounts().register(
            email=data.get("email"),
            full_name=data.get("fullName"),
            password=data.get("password"),
            confirm_password=data.get("confirmPassword"),
        )
    except ValidationError:
        record_signup("invalid")
        raise
    except ConflictError:
        record_signup("conflict")
        raise
    record_signup("created")
    return jsonify({"message": "User registered successfully", "userId": user_id}), 201


@users_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        result = _accounts().login(data.get("email"), data.get("password"))
    except (ValidationError, AuthError):
        record_login("rejected")
        raise
    record_login("success")
    return jsonify(result), 200


@users_bp.route("/validate", methods=["GET"])
def validate():
    if not current_user.is_authenticated:
        record_token_validation(False)
        return jsonify({"error": "authentication_required"}), 401
    record_token_validation(True)
    return jsonify({"valid": True, "user": current_user.to_dict()}), 200


@users_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"user": current_user.to_dict()}), 200


__all__ = ["users_bp"]
