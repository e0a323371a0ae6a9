# Routes package init
"""
MessageWall Backend - API Routes Package
==========================================

Route Inventory:
    - messages.py: GET  /api/messages              (list, newest first)
                   POST /api/messages              (create)
                   POST /api/messages/{id}/like    (like / unlike)
    - health.py:   GET  /health                    (service health check)

Routes handle HTTP concerns only; business logic belongs in services.
"""
