"""Base extraction client interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..core.models import ExtractionHints, SourceDocument


class BaseExtractionClient(ABC):
    """
    Abstract client for a remote document extraction service.

    Implementations may share connections between concurrent calls but must
    not keep per-request state on the instance.
    """

    name: str = "base"

    @abstractmethod
    async def submit(
        self,
        document: SourceDocument,
        hints: ExtractionHints | None = None,
    ) -> Any:
        """
        Upload a document and return the decoded response body.

        Args:
            document: Validated document to upload
            hints: Optional processing hints

        Returns:
            Decoded JSON body, untrusted and not yet schema-validated

        Raises:
            TransportError: Network failure, timeout or non-success status
            ResponseFormatError: Body is not JSON
        """
        pass

    @abstractmethod
    async def check_ready(self) -> bool:
        """Whether the remote service reports itself ready."""
        pass

    async def aclose(self) -> None:
        """Release pooled resources."""
        return None
