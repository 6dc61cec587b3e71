"""
QuickNotes Backend — Application Package Initializer
====================================================

What: Marks the `quicknotes` directory as a Python package.
Who:  Used by uvicorn (`quicknotes.main:app`), pytest, and the console script.

Architecture Note:
    The backend keeps the same thin layering for every request:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validate → store op → serialize
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Note record + Pydantic contracts
    ├─────────────────────────────────────┤
    │         Store (In-Memory)           │  ← dict keyed by note ID
    └─────────────────────────────────────┘

    Nothing below the Routes layer imports FastAPI request objects, so the
    service and store can be exercised directly in unit tests.
"""

__version__ = "1.0.0"
