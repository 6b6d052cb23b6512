"""
Auth endpoints — handles signup and login via the Supabase Admin API.
Routes through the backend to bypass Supabase's free-tier rate limits.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import EmailStr, Field

from portal.dependencies import get_auth_client
from portal.domain.enums import UserRole
from portal.domain.models import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class SignUpRequest(CamelModel):
    """Self-service signup is for students only; staff accounts are provisioned."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=2, max_length=120)
    roll_number: str | None = Field(None, max_length=40)
    institution_id: str | None = None


class SignInRequest(CamelModel):
    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    access_token: str
    refresh_token: str
    user_id: str
    email: str
    role: str | None = None


@router.post("/signup", response_model=AuthResponse)
async def signup(req: SignUpRequest, client=Depends(get_auth_client)):
    """
    Create a new student via the Supabase Admin API (service role key).
    Bypasses email rate limits completely.
    """
    role = UserRole.STUDENT.value
    try:
        # 1. Create user via Admin API — auto-confirms, no email sent
        response = client.auth.admin.create_user({
            "email": req.email,
            "password": req.password,
            "email_confirm": True,
            "user_metadata": {"role": role, "name": req.name},
        })

        user = response.user
        if not user:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="User creation failed (no user in response).",
            )

        logger.info(f"Student account created via admin API: {user.id}")

        # 2. Ensure the public.users and students rows exist
        profile = {
            "email": req.email,
            "name": req.name,
            "role": role,
            "institution_id": req.institution_id,
            "is_active": True,
        }
        existing = (
            client.table("users")
            .select("id")
            .eq("id", user.id)
            .maybe_single()
            .execute()
        )
        if existing and existing.data:
            client.table("users").update(profile).eq("id", user.id).execute()
        else:
            client.table("users").insert({"id": user.id, **profile}).execute()

        client.table("students").insert({
            "user_id": user.id,
            "name": req.name,
            "email": req.email,
            "roll_number": req.roll_number,
            "institution_id": req.institution_id,
            "is_active": True,
        }).execute()

        # 3. Sign in to get tokens
        sign_in_response = client.auth.sign_in_with_password({
            "email": req.email,
            "password": req.password,
        })

        session = sign_in_response.session
        if not session:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="User created but sign-in failed. Try logging in manually.",
            )

        return AuthResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            user_id=user.id,
            email=req.email,
            role=role,
        )

    except HTTPException:
        raise
    except Exception as e:
        error_msg = str(e)
        if "already registered" in error_msg or "already exists" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A user with this email already exists.",
            )
        logger.error(f"Signup failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Signup failed",
        )


@router.post("/login", response_model=AuthResponse)
async def login(req: SignInRequest, client=Depends(get_auth_client)):
    """
    Login via the backend using the Supabase Admin client.
    Bypasses rate limits on the auth endpoint.
    """
    try:
        response = client.auth.sign_in_with_password({
            "email": req.email,
            "password": req.password,
        })

        session = response.session
        user = response.user

        if not session or not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password.",
            )

        # Fetch role from public.users
        profile = (
            client.table("users")
            .select("role, is_active")
            .eq("id", user.id)
            .maybe_single()
            .execute()
        )
        row = profile.data if profile and profile.data else {}
        if row.get("is_active") is False:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is deactivated",
            )

        return AuthResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            user_id=user.id,
            email=req.email,
            role=row.get("role"),
        )

    except HTTPException:
        raise
    except Exception as e:
        error_msg = str(e)
        if "Invalid login" in error_msg or "invalid" in error_msg.lower():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password.",
            )
        logger.error(f"Login failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed",
        )
