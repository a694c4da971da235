"""
RawPayload — email body as handed over by the mail-fetch collaborator.
"""
from dataclasses import dataclass
from typing import Union

TRANSFER_IDENTITY = "identity"
TRANSFER_QUOTED_PRINTABLE = "quoted-printable"
TRANSFER_BASE64 = "base64"


@dataclass(frozen=True)
class RawPayload:
    """Opaque email body plus its declared transfer encoding."""

    data: Union[bytes, str]
    transfer_encoding: str = TRANSFER_IDENTITY     # "identity" | "quoted-printable" | "base64"
    mime_type: str = "text/html"

    @property
    def encoding(self) -> str:
        """Normalized transfer encoding token (lowercase, stripped)."""
        return (self.transfer_encoding or TRANSFER_IDENTITY).strip().lower()

    def __repr__(self) -> str:
        return f"RawPayload({self.mime_type}, {self.encoding}, {len(self.data or '')} chars)"
