"""
User Data API

Per-user JSON document storage behind Firebase ID token authentication.
"""

__version__ = "1.0.0"
