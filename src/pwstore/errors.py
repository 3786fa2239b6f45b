"""
errors.py
Jerarquía cerrada de errores del almacén. Un tipo por cada causa de fallo.
"""


class VaultError(Exception):
    """Error base de todas las operaciones sobre el vault."""


class VaultIOError(VaultError):
    """No se pudo abrir, leer o escribir el fichero del vault."""


class CorruptData(VaultError):
    """El fichero es demasiado corto para contener salt y nonce."""


class DecryptionFailed(VaultError):
    """
    La etiqueta de autenticación no coincide.
    Contraseña incorrecta o fichero manipulado: no se distingue a propósito.
    """


class InvalidEncoding(VaultError):
    """El texto descifrado no es UTF-8 válido."""


class MalformedDocument(VaultError):
    """El texto descifrado no es un documento JSON nombre -> secreto."""
