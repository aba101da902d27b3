"""Identity token validation

Sign-in happens at the managed identity provider. It hands the browser a
signed bearer token which this service only verifies; the service never
stores passwords or runs a login flow.

Token Claims:
=============

- sub: Subject identifier at the identity provider (opaque string)
- email: Verified email address. Used to find or provision the User row
- name: Display name (optional, used when provisioning)
- iat / exp: Issued-at and expiry Unix timestamps

The role is NOT taken from the token. It is always read from the persisted
User row, so demoting an admin takes effect on their next request.

Example Token Payload:
{
  "sub": "google-oauth2|1093847561",
  "email": "asha@example.com",
  "name": "Asha Rao",
  "iat": 1704368400,
  "exp": 1704372000
}
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from config import get_settings


def create_access_token(
    email: str,
    name: Optional[str] = None,
    subject: Optional[str] = None,
    expires_in_minutes: Optional[int] = None,
) -> str:
    """Sign a token the way the identity provider does.

    Production tokens come from the provider. This exists for local
    development (scripts/seed_admin.py) and tests.
    """
    settings = get_settings()
    if expires_in_minutes is None:
        expires_in_minutes = settings.JWT_EXPIRY_MINUTES

    now = datetime.now(timezone.utc)
    payload = {
        'sub': subject or email.lower(),
        'email': email.lower(),
        'iat': int(now.timestamp()),
        'exp': int((now + timedelta(minutes=expires_in_minutes)).timestamp()),
    }
    if name:
        payload['name'] = name

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate an identity token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, tampered, or lacks an email claim
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")

    if not payload.get("email"):
        raise jwt.InvalidTokenError("Invalid token: missing email claim")
    return payload
