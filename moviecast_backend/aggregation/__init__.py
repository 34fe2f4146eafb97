"""
Request-time composition of local catalog data with the TMDb and Open-Meteo clients.
"""
