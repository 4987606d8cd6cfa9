from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def verify_session_token(token: str) -> Optional[dict]:
    """
    Verify and decode a session JWT issued by the primary directory

    Args:
        token: JWT token string (HS256, signed with the directory secret)

    Returns:
        Decoded payload dict or None if invalid, expired or missing `sub`
    """
    try:
        payload = jwt.decode(
            token,
            ApplicationConfig.DIRECTORY_JWT_SECRET,
            algorithms=["HS256"],
            audience=ApplicationConfig.DIRECTORY_JWT_AUDIENCE,
        )
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
