"""
Web interface (Django) for statement uploads.

Exposes POST /import/upload for authenticated users.
"""
