"""Test package for DocuChat.

Structure:
    - unit/: Individual component tests with fakes for the service and extractor
    - integration/: Controller, real PDF extraction, and JSON persistence together

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
