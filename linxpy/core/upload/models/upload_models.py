"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass
from typing import Dict, Any, Optional

# Name of the synthetic object listing the URLs of a batch
COLLECTION_NAME = 'linx.collection'


@dataclass
class UploadRequest:
    """
    A single upload, created right before the network call.

    Attributes:
        name: Remote object base name
        size: Total byte count, known in advance
        source: Byte source with a sync or async read(n)
        ttl: Lifetime in seconds (0 = server default)
        delete_key: Caller-supplied delete key, if any
    """
    name: str
    size: int
    source: Any
    ttl: int = 0
    delete_key: Optional[str] = None

    @property
    def path(self) -> str:
        """Returns the request path relative to the server."""
        return f"upload/{self.name}"


@dataclass(frozen=True)
class UploadResult:
    """
    Server response for a completed upload.

    Wire fields: Filename, Url, Delete_Key, Expiry, Size.

    Example:
        >>> UploadResult.from_dict({'Url': 'https://linx.example/abc.txt'}).url
        'https://linx.example/abc.txt'
    """
    filename: str
    url: str
    delete_key: str
    expiry: str
    size: str

    WIRE_FIELDS = {
        'filename': 'Filename',
        'url': 'Url',
        'delete_key': 'Delete_Key',
        'expiry': 'Expiry',
        'size': 'Size',
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadResult':
        """
        Create from the decoded response body.

        An exact-case field name wins; otherwise a case-insensitive match
        is used. Missing fields become empty strings.
        """
        folded = {str(k).lower(): v for k, v in data.items()}
        values = {}
        for attr, wire in cls.WIRE_FIELDS.items():
            value = data[wire] if wire in data else folded.get(wire.lower())
            values[attr] = '' if value is None else str(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        """Convert to wire format."""
        return {wire: getattr(self, attr) for attr, wire in self.WIRE_FIELDS.items()}


@dataclass(frozen=True)
class DeleteResult:
    """
    Outcome of a delete request.

    Truthy when the server confirmed the deletion.
    """
    url: str
    deleted: bool
    status: str

    def __bool__(self) -> bool:
        return self.deleted
