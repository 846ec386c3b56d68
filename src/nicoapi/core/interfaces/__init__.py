"""Core abstractions (Protocol).

Adapters implement these contracts; the core depends only on them.
"""

from nicoapi.core.interfaces.credentials import CredentialSource
from nicoapi.core.interfaces.transport import Transport

__all__ = ["CredentialSource", "Transport"]
