"""
blob.py
Formato binario del fichero: salt(16) || iv(12) || ciphertext+tag.
"""

from pwstore.crypto import _IV_SIZE, _SALT_SIZE
from pwstore.errors import CorruptData

_HEADER_SIZE = _SALT_SIZE + _IV_SIZE


def encode_blob(salt: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """Concatena salt, iv y ciphertext."""
    return bytes(salt) + bytes(iv) + bytes(ciphertext)


def decode_blob(data: bytes) -> tuple[bytes, bytes, bytes]:
    """
    Separa salt, iv y ciphertext.
    Solo comprueba la longitud mínima; la autenticidad la verifica AES-GCM.
    """
    if len(data) < _HEADER_SIZE:
        raise CorruptData(
            f"Datos corruptos: {len(data)} bytes, se esperaban al menos {_HEADER_SIZE}"
        )
    salt = data[:_SALT_SIZE]
    iv = data[_SALT_SIZE:_HEADER_SIZE]
    ciphertext = data[_HEADER_SIZE:]
    return salt, iv, ciphertext
