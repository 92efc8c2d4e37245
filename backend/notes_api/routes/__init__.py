"""
Notes API Backend - API Routes Package
=======================================

Route Inventory:
    - notes.py:   POST   /api/notes          (create)
                  GET    /api/notes          (list with q/sort/order/limit/offset)
                  GET    /api/notes/{id}     (get one)
                  PATCH  /api/notes/{id}     (partial update)
                  DELETE /api/notes/{id}     (delete)
    - health.py:  GET    /health             (liveness)

Routes stay thin: extract parameters, call NoteService, pick the status code.
"""
