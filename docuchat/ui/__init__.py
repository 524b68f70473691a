"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Conversation display, re-rendered on controller change notifications
    - PDF upload widget forwarding bytes to the controller
    - Clear-conversation and light/dark toggle buttons

Contains no conversation logic. Every action goes through SessionController.
"""
