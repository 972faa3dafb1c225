"""
Supabase JWT Authentication

Verifies access tokens issued by Supabase Auth against the project's JWKS
and exposes the owner id to routes as a FastAPI dependency.
"""
import time
import logging
from typing import Optional
from fastapi import HTTPException, Header
from jose import jwt, jwk
import httpx

from app import config

logger = logging.getLogger(__name__)

# JWKS cache
_jwks_cache: Optional[dict] = None
_jwks_cache_time: float = 0
JWKS_CACHE_DURATION = 60 * 60  # 1 hour in seconds

# JWT configuration
JWT_AUDIENCE = "authenticated"
SUPPORTED_ALGORITHMS = ["ES256", "RS256"]


def get_supabase_url() -> str:
    """Get Supabase URL from configuration"""
    if not config.SUPABASE_URL:
        raise ValueError("SUPABASE_URL must be set")
    return config.SUPABASE_URL.rstrip("/")


def get_jwks_url() -> str:
    return f"{get_supabase_url()}/auth/v1/.well-known/jwks.json"


def get_jwt_issuer() -> str:
    return f"{get_supabase_url()}/auth/v1"


async def get_jwks() -> dict:
    """
    Fetch and cache JWKS from Supabase
    Returns cached JWKS if available and not expired
    """
    global _jwks_cache, _jwks_cache_time

    now = time.time()

    if _jwks_cache and (now - _jwks_cache_time) < JWKS_CACHE_DURATION:
        return _jwks_cache

    jwks_url = get_jwks_url()
    logger.info(f"Fetching JWKS from Supabase: {jwks_url}")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            _jwks_cache = response.json()
            _jwks_cache_time = now
            logger.info("JWKS cached successfully")
            return _jwks_cache
    except Exception as e:
        logger.error(f"Failed to fetch JWKS: {e}")
        # Stale keys are better than rejecting every request
        if _jwks_cache:
            logger.warning("Using expired JWKS cache due to fetch failure")
            return _jwks_cache
        raise HTTPException(
            status_code=500,
            detail="Failed to fetch authentication keys"
        )


async def verify_token(token: str) -> dict:
    """
    Verify a Supabase JWT token using JWKS (public keys).
    ES256 and RS256 signing keys are accepted.

    Returns the decoded JWT payload
    Raises HTTPException if verification fails
    """
    try:
        jwks = await get_jwks()

        unverified_header = jwt.get_unverified_header(token)
        kid = unverified_header.get("kid")

        if not kid:
            raise HTTPException(
                status_code=401,
                detail="Token missing key ID (kid)"
            )

        key_data = next(
            (candidate for candidate in jwks.get("keys", []) if candidate.get("kid") == kid),
            None,
        )
        if not key_data:
            raise HTTPException(
                status_code=401,
                detail=f"Key with ID '{kid}' not found in JWKS"
            )

        key = jwk.construct(key_data)

        return jwt.decode(
            token,
            key,
            algorithms=SUPPORTED_ALGORITHMS,
            audience=JWT_AUDIENCE,
            issuer=get_jwt_issuer(),
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=401,
            detail="Token has expired"
        )
    except jwt.JWTClaimsError as e:
        raise HTTPException(
            status_code=401,
            detail=f"Token validation failed: {str(e)}"
        )
    except jwt.JWTError as e:
        raise HTTPException(
            status_code=401,
            detail=f"Invalid token: {str(e)}"
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Token verification error: {e}", exc_info=True)
        raise HTTPException(
            status_code=401,
            detail="Token verification failed"
        )


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the token out of a 'Bearer <token>' header value"""
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Authorization header missing"
        )

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header format. Expected 'Bearer <token>'"
        )
    return token.strip()


async def get_bearer_token(
    authorization: Optional[str] = Header(None)
) -> str:
    """FastAPI dependency returning the raw access token"""
    return extract_bearer_token(authorization)


async def get_current_user_id(
    authorization: Optional[str] = Header(None)
) -> str:
    """
    FastAPI dependency to extract and verify JWT token from Authorization header
    Returns the authenticated user ID (the token's 'sub' claim)
    """
    token = extract_bearer_token(authorization)
    payload = await verify_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=401,
            detail="Invalid token: no user ID"
        )
    return user_id
