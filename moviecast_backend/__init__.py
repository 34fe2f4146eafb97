"""
Shared MovieCast backend library code.

This package holds the external-data aggregation layer (TMDb and Open-Meteo
clients, the response cache, poster URL resolution), the local movie catalog
store, and the import/details composition used by the FastAPI app in `api/`.

App entrypoints should live outside this package and import from
`moviecast_backend` rather than the other way around.
"""
