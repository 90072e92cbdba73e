"""
ShiftLog Relay: Application Package
=====================================

Relays shift handover notes to IPFS through the Pinata pinning service.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       Services (Relay Logic)        │  ← validation, request shaping
    ├─────────────────────────────────────┤
    │         Schemas (Wire Formats)      │  ← Pydantic, inbound + Pinata
    ├─────────────────────────────────────┤
    │     Pinning Client (Outbound HTTP)  │  ← httpx → Pinata
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
