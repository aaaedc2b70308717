from flask import Blueprint, jsonify
from flask_wtf.csrf import generate_csrf

bp = Blueprint("csrf", __name__)


@bp.get("/csrf-token")
def csrf_token():
    # the signed secret lives in the session cookie; the client echoes this value back in a header
    return jsonify({"csrfToken": generate_csrf()})
