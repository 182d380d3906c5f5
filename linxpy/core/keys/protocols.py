"""
Delete-key storage protocols.

Defines the interface the upload orchestrator depends on.
"""
from typing import Dict, Protocol, runtime_checkable


@runtime_checkable
class DeleteKeyStorage(Protocol):
    """
    Protocol for delete-key storage implementations.

    Later records for the same name replace earlier ones.
    """

    def load(self) -> Dict[str, str]:
        """
        Load every known delete key.

        Returns:
            Mapping of remote object name to delete key
        """
        ...

    def append(self, name: str, key: str) -> None:
        """
        Durably record one delete key.

        Args:
            name: Remote object name
            key: Delete key
        """
        ...
