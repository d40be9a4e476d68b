"""Shared type aliases."""

from collections.abc import Callable
from typing import IO, Any, TypeAlias

# A direct media URL or a readable binary stream
Streamable: TypeAlias = str | IO[bytes]

# Caller-supplied stream override: (extractor, track url) -> stream
StreamFactory: TypeAlias = Callable[[Any, str], Streamable]
