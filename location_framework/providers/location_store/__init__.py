"""
Saved-location store providers.
"""

from .supabase_store import SupabaseLocationStore
from .memory_store import InMemoryLocationStore

__all__ = ['SupabaseLocationStore', 'InMemoryLocationStore']
