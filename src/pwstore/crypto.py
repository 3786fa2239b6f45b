import contextlib
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from pwstore.errors import DecryptionFailed, InvalidEncoding

logger = logging.getLogger(__name__)

# Constantes
_SALT_SIZE = 16
_IV_SIZE = 12
_KEY_SIZE = 32
_ITERATIONS = 100_000  # Factor de trabajo PBKDF2


def derive_key(password: str, salt: bytes) -> bytearray:
    """
    Deriva una clave de 32 bytes usando PBKDF2-HMAC-SHA256.
    Devuelve un bytearray para que el llamador pueda borrarlo (ver wipe_key).
    """
    if not salt:
        raise ValueError("salt vacío")
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=_KEY_SIZE,
        salt=bytes(salt),
        iterations=_ITERATIONS,
    )
    try:
        # surrogateescape recupera los bytes originales de un terminal no UTF-8
        secret = password.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError as e:
        raise InvalidEncoding("La contraseña maestra no es texto válido") from e
    return bytearray(kdf.derive(secret))


def wipe_key(key: bytearray) -> None:
    """Sobrescribe con ceros el buffer de la clave."""
    for i in range(len(key)):
        key[i] = 0


@contextlib.contextmanager
def derived_key(password: str, salt: bytes):
    """
    Context manager: deriva la clave y la borra al salir del bloque,
    tanto si termina bien como si lanza una excepción.
    """
    key = derive_key(password, salt)
    try:
        yield key
    finally:
        wipe_key(key)


def _check_params(key, nonce) -> None:
    if len(key) != _KEY_SIZE:
        raise ValueError(f"la clave debe tener {_KEY_SIZE} bytes")
    if len(nonce) != _IV_SIZE:
        raise ValueError(f"el nonce debe tener {_IV_SIZE} bytes")


def encrypt_data(key: bytearray, iv: bytes, plaintext: bytes) -> bytes:
    """
    Cifra datos con AES-256-GCM. Devuelve ciphertext || tag.
    El iv lo genera el llamador y nunca debe repetirse con la misma clave.
    """
    _check_params(key, iv)
    aesgcm = AESGCM(key)
    return aesgcm.encrypt(iv, plaintext, None)


def decrypt_data(key: bytearray, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Descifra y autentica datos AES-256-GCM.
    Si la etiqueta no verifica lanza DecryptionFailed y no devuelve nada.
    """
    _check_params(key, iv)
    aesgcm = AESGCM(key)
    try:
        return aesgcm.decrypt(iv, ciphertext, None)
    except InvalidTag as e:
        logger.debug("Etiqueta GCM inválida (%d bytes cifrados)", len(ciphertext))
        raise DecryptionFailed(
            "No se pudo descifrar el vault (¿contraseña incorrecta?)"
        ) from e
