# Routes package init
"""
ShiftLog Relay: API Routes Package
====================================

Route Inventory:
    - notes.py:   POST /uploadNote   (relay a note to IPFS)
    - health.py:  GET  /health       (service and Pinata status)

Routes stay thin: they extract the request, call a service and return its
result. Errors are formatted by the global handlers in main.py.
"""
