import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from attendance_sync.core.errors import AuthError

# Zoom rejects JWTs that live longer than this
PROVIDER_TOKEN_TTL = timedelta(hours=1)
PROVIDER_TOKEN_ALGORITHM = "HS256"

def verify_token(received: Optional[str], expected: Optional[str]) -> None:
    """Check the webhook verification token. Raises AuthError on mismatch.

    An unset expected token rejects every request.
    """
    if not expected:
        raise AuthError("Verification token is not configured.")
    if received is None or not hmac.compare_digest(received.encode(), expected.encode()):
        raise AuthError("Invalid verification token.")

def mint_provider_token(
    api_key: str,
    secret_key: str,
    now: Optional[datetime] = None,
    ttl: timedelta = PROVIDER_TOKEN_TTL,
    algorithm: str = PROVIDER_TOKEN_ALGORITHM,
) -> str:
    """Create the short-lived JWT used as the Zoom bearer credential"""
    if now is None:
        now = datetime.now(timezone.utc)

    payload = {
        "iss": api_key,
        "exp": now + ttl,
    }
    return jwt.encode(
        payload,
        secret_key,
        algorithm=algorithm
    )

def decode_provider_token(token: str, secret_key: str, algorithm: str = PROVIDER_TOKEN_ALGORITHM):
    """Decode a minted provider token, None if invalid or expired"""
    try:
        return jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm]
        )
    except jwt.PyJWTError:
        return None
