"""Core module for the pokeleague application."""

from .types import FirestoreDocument, SlotDocument

__all__ = ["FirestoreDocument", "SlotDocument"]
