"""
Write paths that pull remote data into the local catalog.
"""
