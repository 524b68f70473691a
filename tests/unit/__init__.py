"""Unit tests for individual components in isolation.

Coverage:
    - session/: log, attachments, streamer, controller state machine
    - parsing/: PDF validation and page-prefixed extraction
    - agent/: configuration and provider error mapping
    - storage/: snapshot persistence

Fakes replace the generative service and extractor; agno classes are patched.
"""
