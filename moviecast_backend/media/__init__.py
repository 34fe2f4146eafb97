"""
Image URL helpers (poster resolution).
"""
