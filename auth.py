import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from flask import abort, current_app, g, request

ADMIN_ROLE = "admin"
_ALGORITHM = "HS256"


def _security_log(msg: str) -> None:
    logging.getLogger("security").info("%s ip=%s path=%s", msg, request.remote_addr, request.path)


def issue_token(secret: str, days: int) -> str:
    payload = {
        "role": ADMIN_ROLE,
        "exp": datetime.now(timezone.utc) + timedelta(days=days),
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def verify_token(header: Optional[str], secret: str) -> Optional[Dict[str, Any]]:
    if not header:
        return None
    token = header.replace("Bearer ", "", 1).strip()
    try:
        return jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except jwt.PyJWTError:
        return None


def authenticate_admin() -> Dict[str, Any]:
    header = request.headers.get("Authorization")
    if not header:
        _security_log("Missing admin token")
        abort(401, description="No token provided")
    claims = verify_token(header, current_app.config["JWT_SECRET"])
    if claims is None or claims.get("role") != ADMIN_ROLE:
        _security_log("Invalid admin token")
        abort(401, description="Invalid token")
    g.admin = claims
    return claims

