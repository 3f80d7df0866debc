"""
Translate Supabase Auth error messages into Japanese (title, message, suggestion)
triples that the front end can show as-is.
"""
from typing import List, Tuple
from app.modules.auth.schemas import AuthErrorMessage

# (substrings to look for, translated message); first match wins
AUTH_ERROR_TABLE: List[Tuple[Tuple[str, ...], AuthErrorMessage]] = [
    (
        ("email not confirmed", "email_not_confirmed"),
        AuthErrorMessage(
            title="メール確認が完了していません",
            message="このメールアドレスはまだ確認されていません。",
            suggestion="登録時に送信された確認メールを確認して、メール内のリンクをクリックしてください。",
        ),
    ),
    (
        ("invalid login credentials", "invalid email or password"),
        AuthErrorMessage(
            title="ログイン認証に失敗しました",
            message="メールアドレスまたはパスワードが正しくありません。",
            suggestion="メールアドレスとパスワードをご確認ください。アカウントをお持ちでない場合は、新規登録からアカウントを作成してください。",
        ),
    ),
    (
        ("user not found",),
        AuthErrorMessage(
            title="アカウントが見つかりません",
            message="このメールアドレスで登録されたアカウントが存在しません。",
            suggestion="メールアドレスをご確認ください。アカウントをお持ちでない場合は、新規登録からアカウントを作成してください。",
        ),
    ),
    (
        ("invalid password", "password reset", "email_recovery_code_expired"),
        AuthErrorMessage(
            title="パスワードが無効です",
            message="パスワードがリセットされているか、有効期限を超えています。",
            suggestion="パスワードをリセットしてください。（パスワードリセット機能は準備中です）",
        ),
    ),
    (
        ("invalid email",),
        AuthErrorMessage(
            title="メールアドレスが無効です",
            message="メールアドレスの形式が正しくありません。",
            suggestion="有効なメールアドレスを入力してください。（例: user@example.com）",
        ),
    ),
    (
        ("rate limit", "too many requests", "too_many_requests"),
        AuthErrorMessage(
            title="ログイン試行が多すぎます",
            message="セキュリティ上の理由から、一時的にログインがブロックされてます。",
            suggestion="数分後にもう一度お試しください。繰り返される場合はお問い合わせください。",
        ),
    ),
    (
        ("user already exists", "email already registered", "user already registered"),
        AuthErrorMessage(
            title="アカウントが既に存在します",
            message="このメールアドレスは既に登録されています。",
            suggestion="ログインページからログインするか、新しいメールアドレスで登録してください。",
        ),
    ),
    (
        ("network", "fetch"),
        AuthErrorMessage(
            title="ネットワークエラー",
            message="インターネット接続を確認してください。",
            suggestion="インターネット接続が安定していることを確認してから、もう一度お試しください。",
        ),
    ),
]

RATE_LIMIT_MARKERS = ("rate limit", "too many requests", "too_many_requests")


def get_auth_error_message(error_message: str) -> AuthErrorMessage:
    """Look up a translated message for a raw auth error; unknown errors keep their text."""
    lowered = (error_message or "").lower()
    for needles, translated in AUTH_ERROR_TABLE:
        if any(needle in lowered for needle in needles):
            return translated.model_copy()
    return AuthErrorMessage(
        title="ログインに失敗しました",
        message=error_message or "ログイン処理中にエラーが発生しました。",
        suggestion="メールアドレスとパスワードをご確認ください。問題が解決しない場合はお問い合わせください。",
    )


def is_rate_limited(error_message: str) -> bool:
    lowered = (error_message or "").lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)
