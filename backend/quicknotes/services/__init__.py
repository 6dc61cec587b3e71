# Services package init
"""
QuickNotes Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and the note store.
How:   Services accept raw payloads, validate them, apply the operation to the
       store, and return response schemas.

Service Inventory:
    - NoteService: list / get / create / replace / update / delete
"""
