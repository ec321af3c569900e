import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session

from . import config
from .database import get_db
from .errors import ConfigurationMissing, TokenExpired, Unauthenticated
from .models import Party

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_party in the error envelope
security = HTTPBearer(auto_error=False)


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the identity service.
    Only the signature, expiry and the ``user_id`` claim matter here.
    """
    if not config.ACCESS_TOKEN_SECRET:
        logger.error("❌ ACCESS_TOKEN_SECRET not configured")
        raise ConfigurationMissing("Access token verification is not configured")

    try:
        payload = jose_jwt.decode(
            token, config.ACCESS_TOKEN_SECRET, algorithms=[config.ACCESS_TOKEN_ALGORITHM]
        )
    except ExpiredSignatureError as e:
        raise TokenExpired(headers={"X-Token-Expired": "true"}) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {e}")
        raise Unauthenticated("Invalid token") from e

    if not payload.get("user_id"):
        logger.error(f"❌ Token missing user_id claim. Available claims: {list(payload.keys())}")
        raise Unauthenticated("Invalid token claims")

    return payload


def resolve_party(db: Session, token: str) -> Party:
    """Resolve the authenticated party for a raw token"""
    payload = verify_access_token(token)
    party = (
        db.query(Party).filter(Party.id == payload["user_id"], Party.is_active.is_(True)).first()
    )
    if not party:
        logger.warning(f"⚠️ Token for unknown or inactive party {payload['user_id']}")
        raise Unauthenticated("Authentication failed")
    return party


async def get_current_party(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> Party:
    """Get current party from the bearer token"""
    if not credentials:
        raise Unauthenticated()

    party = resolve_party(db, credentials.credentials)
    logger.debug(f"✅ Party authenticated: {party.id}")
    return party
