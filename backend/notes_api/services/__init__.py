# Services package init
"""
Notes API: Services Layer
=========================

What:  Domain logic layer sitting between routes (HTTP) and repositories (persistence).
How:   Services accept domain records, apply domain rules, and delegate to a
       repository. They are attached to the app at startup and resolved in
       routes through FastAPI's dependency injection.

Service Inventory:
    - NoteService: Validates note payloads and delegates CRUD to a NoteRepository
"""
