# Services package init
"""
ShiftLog Relay: Services Layer
================================

Service Inventory:
    - PinningClient (abstract): Interface for IPFS pinning providers
    - PinataClient: Concrete implementation over Pinata's REST API (httpx)
    - NoteService: Validates a note, builds the PinRequest, pins it once
"""
