from __future__ import annotations

import os
from dataclasses import dataclass

from supabase import Client, create_client


@dataclass(frozen=True)
class SupabaseSettings:
    url: str
    service_role_key: str

    @classmethod
    def from_env(cls) -> "SupabaseSettings | None":
        """Return settings when both variables are set, else `None` (catalog falls back to memory)."""
        url = (os.getenv("SUPABASE_URL") or "").strip()
        key = (os.getenv("SUPABASE_SERVICE_ROLE_KEY") or "").strip()
        if not url:
            return None
        if not key:
            raise RuntimeError("SUPABASE_URL is set but SUPABASE_SERVICE_ROLE_KEY is not.")
        return cls(url=url, service_role_key=key)


def create_supabase_admin_client(settings: SupabaseSettings) -> Client:
    """
    Create a Supabase client using the service role key (bypasses RLS).

    The catalog is single-tenant, so the API uses this client for every catalog operation.
    """

    return create_client(settings.url, settings.service_role_key)
