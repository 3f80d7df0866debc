"""
Content Configuration
Fixed catalog values, input limits and the user-facing (Japanese) messages
returned by the API. Services import from here so wording stays consistent.
"""

# Categories a project can be filed under
CATEGORIES = [
    "Webアプリ",
    "モバイルアプリ",
    "デスクトップアプリ",
    "Webサイト",
    "ツール・ユーティリティ",
    "ゲーム",
    "その他",
]

# Input limits (counted after trimming)
COMMENT_MAX_LENGTH = 100
PROJECT_UPDATE_MAX_LENGTH = 50
PROJECT_TITLE_MAX_LENGTH = 100
PROJECT_TAG_MAX_COUNT = 10

# Listing
HOME_PROJECT_LIMIT = 6
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Images
ALLOWED_IMAGE_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

# Embedded owner/author profile columns for list and detail queries
PROFILE_EMBED = "profiles:user_id (full_name, avatar_url)"

ANONYMOUS_NAME = "匿名ユーザー"

MESSAGES = {
    # generic
    "missing_fields": "必須フィールドが不足しています",
    "id_required": "IDが必要です",
    "unauthenticated": "ユーザーが認証されていません",
    "invalid_request": "リクエストの形式が正しくありません",
    "request_failed": "リクエスト処理中にエラーが発生しました",
    "forbidden_delete": "削除する権限がありません",
    "forbidden_edit": "編集する権限がありません",
    "too_many_requests": "リクエストが多すぎます。しばらくしてからもう一度お試しください。",
    # projects
    "project_not_found": "プロジェクトが見つかりません",
    "project_title_too_long": f"タイトルは{PROJECT_TITLE_MAX_LENGTH}文字以内で入力してください",
    "project_invalid_url": "URLは http:// または https:// で始まる必要があります",
    "project_invalid_image_url": "画像URLは http:// または https:// で始まる必要があります",
    "project_invalid_category": "無効なカテゴリが含まれています",
    "project_too_many_tags": f"タグは{PROJECT_TAG_MAX_COUNT}個以内で入力してください",
    "project_create_failed": "プロジェクトの投稿に失敗しました",
    "project_update_failed": "プロジェクトの更新に失敗しました",
    "project_delete_failed": "削除に失敗しました。もう一度お試しください。",
    "profile_create_failed": "プロフィールの作成に失敗しました。もう一度お試しください。",
    "login_required": "ログインが必要です",
    # images
    "image_invalid_type": "画像ファイル（PNG、JPEG、GIF、WebP）を選択してください",
    "image_too_large": "画像サイズが大きすぎます",
    "image_upload_failed": "画像のアップロードに失敗しました",
    # likes
    "like_failed": "いいねの更新に失敗しました",
    # comments
    "comment_too_long": f"コメントは{COMMENT_MAX_LENGTH}文字以内で入力してください",
    "comment_not_found": "コメントが見つかりません",
    "comment_create_failed": "コメントの追加に失敗しました",
    "comment_delete_failed": "コメントの削除に失敗しました",
    # project updates
    "update_too_long": f"改善履歴は{PROJECT_UPDATE_MAX_LENGTH}文字以内で入力してください",
    "update_not_found": "改善履歴が見つかりません",
    "update_forbidden_add": "このプロジェクトの改善履歴を追加する権限がありません",
    "update_create_failed": "改善履歴の追加に失敗しました",
    "update_delete_failed": "改善履歴の削除に失敗しました",
    # profiles
    "profile_not_found": "プロフィールが見つかりません",
    "profile_update_failed": "プロフィールの更新に失敗しました",
    # auth
    "terms_not_agreed": "利用規約と個人情報保護方針に同意する必要があります",
    "signup_failed": "登録に失敗しました",
    "login_failed": "ログインに失敗しました",
    "confirm_failed": "メール確認に失敗しました",
    # contact
    "contact_missing_fields": "すべての項目を入力してください",
    "contact_invalid_email": "有効なメールアドレスを入力してください",
    "contact_sent": "お問い合わせを送信しました",
    "contact_accepted": "お問い合わせを受け付けました。管理者が確認いたします。",
    "contact_not_configured": "メール通知は設定されていません。ログをご確認ください。",
    "contact_failed": "送信に失敗しました。もう一度お試しください。",
}
