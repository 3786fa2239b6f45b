"""
pwstore
Almacén local de secretos cifrado con una contraseña maestra.
"""

from pwstore.errors import (
    CorruptData,
    DecryptionFailed,
    InvalidEncoding,
    MalformedDocument,
    VaultError,
    VaultIOError,
)
from pwstore.storage import Vault, load_vault, new_vault, save_vault

__version__ = "0.1.0"

__all__ = [
    "Vault",
    "new_vault",
    "load_vault",
    "save_vault",
    "VaultError",
    "VaultIOError",
    "CorruptData",
    "DecryptionFailed",
    "InvalidEncoding",
    "MalformedDocument",
]
