"""
Account endpoints.

Endpoints:
    POST /api/auth/signup  -- Create an account.
    POST /api/auth/login   -- Exchange email and password for a token.
    POST /api/auth/logout  -- Acknowledge a logout (stateless).
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from ..accounts import get_account_service
from ..validation import validate_login, validate_signup
from . import json_body, storage_guard

auth_bp = Blueprint("auth", __name__)

# Cookie some browser clients keep the token in; cleared on logout.
TOKEN_COOKIE = "jwtToken"


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple[Response, int]:
    """
    Register a new user.

    Expects ``email`` and ``password`` in a JSON body.

    Returns:
        201 on success.
        400 if the input is invalid or the email is already registered.
    """
    email, password = validate_signup(json_body())
    with storage_guard("Error creating user"):
        get_account_service().register(email, password)
    return jsonify({"status": True, "message": "User created successfully"}), 201


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate a user and issue a token.

    The same ``"Invalid credentials"`` answer is given for an unknown
    email and a wrong password.

    Returns:
        200 with the token in ``data``.
        400 if email or password are missing.
        401 if the credentials do not match.
    """
    email, password = validate_login(json_body())
    with storage_guard("Error logging in"):
        token = get_account_service().login(email, password)
    return jsonify({"status": True, "message": "Login successful", "data": token}), 200


@auth_bp.route("/logout", methods=["POST"])
def logout() -> Response:
    """
    Log out.

    The token is not checked and stays valid until it expires; the client
    is expected to discard it.
    """
    get_account_service().logout()
    response = jsonify({"status": True, "message": "Logged out successfully"})
    response.delete_cookie(TOKEN_COOKIE)
    return response
