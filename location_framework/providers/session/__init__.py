"""
Session (authentication) providers.
"""

from .supabase_auth import SupabaseAuthSession
from .local_session import LocalSession

__all__ = ['SupabaseAuthSession', 'LocalSession']
