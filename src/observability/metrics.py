from __future__ import annotations

from flask import Blueprint, Response
from prometheus_client import Counter, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

SIGNUPS = Counter(
    "tunely_signups_total",
    "Signup attempts by outcome.",
    ["outcome"],
)
LOGINS = Counter(
    "tunely_logins_total",
    "Login attempts by outcome.",
    ["outcome"],
)
TOKEN_VALIDATIONS = Counter(
    "tunely_token_validations_total",
    "Bearer token validation requests by result.",
    ["result"],
)


def record_signup(outcome: str) -> None:
    SIGNUPS.labels(outcome=outcome).inc()


def record_login(outcome: str) -> None:
    LOGINS.labels(outcome=outcome).inc()


def record_token_validation(valid: bool) -> None:
    TOKEN_VALIDATIONS.labels(result="valid" if valid else "invalid").inc()


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
