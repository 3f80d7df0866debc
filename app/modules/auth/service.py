import hashlib
import logging
import time
from supabase import Client
from app.config.content_config import MESSAGES
from app.config.settings import settings
from app.modules.auth.auth_errors import get_auth_error_message, is_rate_limited
from app.modules.auth.schemas import (
    LoginRequest, SignupRequest, TokenResponse, SignupResponse, ConfirmRequest, ConfirmResponse
)
from app.modules.profiles.service import ProfileService
from fastapi import HTTPException
from typing import Dict, Any, NoReturn, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _evict_expired(now: float) -> None:
    for key in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
        del _AUTH_USER_CACHE[key]


def raise_auth_error(error_message: str, status_code: int) -> NoReturn:
    """Raise an HTTPException whose detail is the translated (title, message, suggestion) triple."""
    translated = get_auth_error_message(error_message)
    if is_rate_limited(error_message):
        status_code = 429
    raise HTTPException(status_code=status_code, detail=translated.model_dump())


class AuthService:
    def __init__(self, supabase: Client, auth_client: Optional[Client] = None):
        self.supabase = supabase
        self.auth_client = auth_client or supabase

    def signup(self, signup_data: SignupRequest) -> SignupResponse:
        """Register a new user and make sure a profile row exists"""
        if not signup_data.agreed_to_terms:
            raise HTTPException(status_code=400, detail=MESSAGES["terms_not_agreed"])
        if not signup_data.full_name.strip():
            raise HTTPException(status_code=400, detail=MESSAGES["missing_fields"])
        try:
            auth_response = self.auth_client.auth.sign_up({
                "email": signup_data.email,
                "password": signup_data.password,
                "options": {
                    "data": {"full_name": signup_data.full_name.strip()},
                    "email_redirect_to": f"{settings.site_url.rstrip('/')}/auth/confirm",
                }
            })
        except Exception as e:
            logger.info("Signup rejected for %s: %s", signup_data.email, e)
            raise_auth_error(str(e) or MESSAGES["signup_failed"], 400)

        if not auth_response.user:
            raise_auth_error(MESSAGES["signup_failed"], 400)

        user = auth_response.user
        try:
            ProfileService(self.supabase).upsert_profile(
                user_id=user.id,
                email=user.email or signup_data.email,
                full_name=signup_data.full_name.strip(),
            )
        except HTTPException as e:
            # The profile is recreated on first project post if this fails
            logger.error("Profile creation failed for %s: %s", user.id, e.detail)

        confirmation_required = auth_response.session is None
        return SignupResponse(
            user_id=user.id,
            email=user.email or signup_data.email,
            confirmation_required=confirmation_required,
            message="確認メールを送信しました。メール内のリンクをクリックして登録を完了してください。"
            if confirmation_required else "登録が完了しました",
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.auth_client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            logger.info("Login rejected for %s: %s", login_data.email, e)
            raise_auth_error(str(e) or MESSAGES["login_failed"], 401)

        if not auth_response.user or not auth_response.session:
            raise_auth_error("Invalid login credentials", 401)

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def confirm_email(self, confirm_data: ConfirmRequest) -> ConfirmResponse:
        """Verify the token_hash from the confirmation mail"""
        token_hash = (confirm_data.token_hash or "").strip().lstrip("#")
        if not token_hash:
            raise HTTPException(status_code=400, detail={
                "title": "確認トークンが見つかりません",
                "message": "メール内のリンクからアクセスしてください。",
                "suggestion": "登録時に送信されたメール内のリンクをクリックしてください。リンクの有効期限は24時間です。",
            })
        try:
            auth_response = self.auth_client.auth.verify_otp({
                "token_hash": token_hash,
                "type": confirm_data.type,
            })
        except Exception as e:
            logger.info("Email confirmation failed: %s", e)
            raise_auth_error(str(e) or MESSAGES["confirm_failed"], 400)

        user = getattr(auth_response, "user", None)
        return ConfirmResponse(
            user_id=user.id if user else None,
            email=user.email if user else None,
            confirmed=True,
            message="メールアドレスの確認が完了しました",
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail=MESSAGES["unauthenticated"])
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
                _evict_expired(now)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            logger.debug("Token rejected: %s", e)
            raise HTTPException(status_code=401, detail=MESSAGES["unauthenticated"])

    def logout(self, token: str) -> bool:
        """Revoke the session behind the token; tokens are JWTs so this is best-effort"""
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning("Sign out failed: %s", e)
            return False
        finally:
            _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
