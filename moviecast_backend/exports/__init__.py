"""
Catalog export formats (CSV, XLSX).
"""
