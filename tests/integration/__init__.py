"""
Integration tests that call the live Article Search API.

Require NYT_API_KEY in the environment or .env file; skipped otherwise.
"""
