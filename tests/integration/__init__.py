"""Integration tests for components working together.

Coverage:
    - Full chat workflow from PDF upload to typed-out reply
    - Snapshot persistence across controller instances (page reload)
    - Live model call when an API key is configured
"""
