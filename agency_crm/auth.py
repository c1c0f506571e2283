import logging
from typing import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session, joinedload

from .config import ADMIN_EMAILS, AUTH_JWT_ALGORITHM, AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET
from .database import get_db
from .models import APP_ROLES, Profile, UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer()


def verify_access_token(token: str) -> dict:
    """
    Verify a hosted-auth access token (HS256, signed with the project JWT secret).
    Signature, expiry and audience are checked by python-jose.
    """
    try:
        payload = jose_jwt.decode(
            token,
            AUTH_JWT_SECRET,
            algorithms=[AUTH_JWT_ALGORITHM],
            audience=AUTH_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not payload.get("sub"):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")
    return payload


def _names_from_claims(claims: dict) -> tuple:
    metadata = claims.get("user_metadata") or {}
    return metadata.get("first_name"), metadata.get("last_name")


def find_or_create_profile(db: Session, claims: dict) -> Profile:
    auth_uid = claims["sub"]
    email = (claims.get("email") or "").lower() or None

    profile = (
        db.query(Profile)
        .filter(Profile.auth_uid == auth_uid)
        .options(joinedload(Profile.roles))
        .first()
    )
    if profile:
        return profile

    first_name, last_name = _names_from_claims(claims)
    profile = Profile(auth_uid=auth_uid, email=email, first_name=first_name, last_name=last_name)
    db.add(profile)
    db.flush()

    if email and email in ADMIN_EMAILS:
        db.add(UserRole(profile_id=profile.id, role="admin"))
        logger.info(f"✅ Granted admin role to bootstrap account {email}")

    db.commit()
    db.refresh(profile)
    logger.info(f"✅ Created profile {profile.id} for {email}")
    return profile


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    """Authenticated profile, whether or not it holds a role"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = verify_access_token(credentials.credentials)
    return find_or_create_profile(db, claims)


async def get_current_user(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Authenticated team member (any role)"""
    if not profile.is_team_member:
        logger.warning(f"⚠️ Profile {profile.id} is not a team member")
        raise HTTPException(status_code=403, detail="You do not have access to this application")
    return profile


def require_roles(*roles: str) -> Callable:
    """Dependency factory allowing only team members holding one of the roles"""
    unknown = set(roles) - set(APP_ROLES)
    if unknown:
        raise ValueError(f"Unknown roles: {unknown}")

    async def checker(user: Profile = Depends(get_current_user)) -> Profile:
        if not any(user.has_role(role) for role in roles):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return checker


require_admin = require_roles("admin")
require_billing_reader = require_roles("admin", "bookkeeper")
require_scheduling_reader = require_roles("admin", "bookkeeper", "gsa_contributor")


def gsa_only(user: Profile) -> bool:
    """GSA contributors without a broader role only see GSA facilities and their jobs"""
    return (
        user.has_role("gsa_contributor")
        and not user.has_role("admin")
        and not user.has_role("bookkeeper")
    )
