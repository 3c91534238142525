"""
Authentication utilities for Appwrite JWT verification.
"""
import jwt
from fastapi import HTTPException, status
from appwrite.services.users import Users
from appwrite.exception import AppwriteException

from ward_admin.core.appwrite import AppwriteClient


def verify_jwt_token(token: str) -> dict:
    """
    Verify Appwrite JWT token and return payload.

    Args:
        token: JWT token from Authorization header

    Returns:
        Decoded JWT payload containing user information

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        # Appwrite signs the token; we only check expiry and then confirm
        # the user exists in Appwrite
        payload = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": True}
        )

        return payload

    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_appwrite_user(user_id: str) -> dict:
    """
    Get user information from Appwrite.

    Raises:
        HTTPException: If user not found or API error
    """
    try:
        users = Users(AppwriteClient.get_client())
        user = users.get(user_id)
        return user

    except AppwriteException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Failed to verify user: {str(e)}",
        )
