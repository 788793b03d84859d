"""WhatsApp protocol client integration"""

from .base import CredentialState, Session, SessionFactory
from .baileys import BaileysClient, BaileysSession, BaileysSessionFactory

__all__ = [
    "BaileysClient",
    "BaileysSession",
    "BaileysSessionFactory",
    "CredentialState",
    "Session",
    "SessionFactory",
]
