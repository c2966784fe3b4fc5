"""Core data types for the pokeleague application."""

from typing import Any, Optional, TypedDict


class _FirestoreDocumentBase(TypedDict):
    id: str


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    created_at: Any
    updated_at: Any


class SlotDocument(TypedDict, total=False):
    """A participant evidence slot as stored on a match document."""

    imageUrl: Optional[str]
    damagePoints: Optional[int]
    winnerSelection: Optional[str]

