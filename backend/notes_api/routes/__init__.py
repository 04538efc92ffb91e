# Routes package init
"""
Notes API: HTTP Routes Package
==============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:  GET/POST /notes, GET/PUT/DELETE /notes/{id}

OpenAPI description: /api-docs/openapi.json (generated by FastAPI from the
route declarations and schemas; Swagger UI at /swagger-ui, ReDoc at /redoc).

Design Principle:
    Routes are thin. They extract inputs, assign server-owned fields
    (id, createdAt), call NoteService and pick the success status code.
    Error status codes are decided by the global handlers in main.py.
"""
