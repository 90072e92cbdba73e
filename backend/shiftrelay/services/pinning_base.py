"""
ShiftLog Relay: Abstract Pinning Client Interface
===================================================

What:  Abstract base class defining the contract for IPFS pinning providers.
How:   Concrete implementations inherit from PinningClient and implement pin()
       and health_check().
Who:   Called by NoteService while relaying a note; by /health for the probe.

Implementations:
    - PinataClient: Pinata pinJSONToIPFS over httpx (services/pinata_service.py)
    - Test doubles in tests/conftest.py, which never touch the network
"""

from abc import ABC, abstractmethod

from shiftrelay.schemas.note import PinContent, PinMetadata


class PinningClient(ABC):
    """
    Abstract interface for pinning a JSON document to IPFS.

    Contract:
        - pin() makes at most one outbound request and returns the content identifier
        - Every provider-specific failure is wrapped in UpstreamError
        - Nothing is retried and nothing is cached between calls
    """

    @abstractmethod
    async def pin(self, content: PinContent, metadata: PinMetadata) -> str:
        """
        Pin `content` and return its content identifier.

        Args:
            content:  The document to pin (note text + receipt timestamp).
            metadata: Provider dashboard metadata (display name).

        Returns:
            str: Non-empty content identifier (e.g. "QmYwAPJzv5CZsnA...").

        Raises:
            UpstreamError: Network failure, timeout, non-2xx status or a
                response without a content identifier.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight probe of the provider. Returns False instead of raising.
        """
        ...
