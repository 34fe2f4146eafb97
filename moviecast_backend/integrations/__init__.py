"""
External system integrations (TMDb, Open-Meteo).

Each provider client lives under this namespace and shares the cached HTTP
boundary in `moviecast_backend.integrations.http`, so app entrypoints (`api/`)
never talk to a provider directly.
"""
