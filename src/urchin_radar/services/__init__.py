"""
Shared service utilities.

- http.py - requests session and httpx async client, one attempt per request
"""
