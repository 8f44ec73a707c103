from .client import supabase_client, SupabaseClient

__all__ = ["supabase_client", "SupabaseClient"]
