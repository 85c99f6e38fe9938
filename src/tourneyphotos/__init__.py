"""tourneyphotos - Tournament player photo sync with Supabase Storage."""

__version__ = "0.1.0"
