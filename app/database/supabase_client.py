from supabase import create_client, Client, ClientOptions
from app.config import settings
from typing import Any, Dict, Optional


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Ownership is checked by the services."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def create_auth_client(cls) -> Client:
        """Fresh anon client for sign-in/sign-up so a user session never lands on the shared client."""
        return create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_auth_client() -> Client:
    return SupabaseClient.create_auth_client()


def fetch_one(supabase: Client, table: str, row_id: str, columns: str = "*", column: str = "id") -> Optional[Dict[str, Any]]:
    """Return the first row where column == row_id, or None. Unlike .single() this does not raise on 0 rows."""
    result = supabase.table(table)\
        .select(columns)\
        .eq(column, row_id)\
        .limit(1)\
        .execute()
    if not result.data:
        return None
    return result.data[0]
