"""HTTP/WebSocket gateway over a Baileys WhatsApp session."""

__version__ = "0.1.0"
