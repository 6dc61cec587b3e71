# Routes package init
"""
QuickNotes Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:   GET/POST   /notes
                  GET/PUT/PATCH/DELETE /notes/{note_id}
    - health.py:  GET /health

Routes stay thin: pull input off the request, call NoteService, return its
result. Validation and not-found handling live in the service.
"""
