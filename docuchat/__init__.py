"""DocuChat - a chat client that can attach a PDF's text to the next question.

Sends one prompt at a time to an OpenAI-compatible model through Agno and
types the reply out client side, with NiceGUI for the page and Pydantic for
state and configuration.

Components:
    - session: conversation log, attachment, typing streamer, controller
    - agent: single-shot completion service
    - parsing: PDF text extraction
    - storage: session snapshot persistence
    - ui: Web interface for chat interactions
    - models: Message, attachment, and snapshot schemas
"""

__version__ = "0.1.0"
