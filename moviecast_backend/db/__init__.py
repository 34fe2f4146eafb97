"""
Database client helpers (Supabase).
"""
