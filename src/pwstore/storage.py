import os
import json
import logging
import tempfile
from pathlib import Path
from typing import Optional, Set

from pwstore.blob import decode_blob, encode_blob
from pwstore.crypto import (
    _IV_SIZE,
    _SALT_SIZE,
    decrypt_data,
    derived_key,
    encrypt_data,
)
from pwstore.errors import InvalidEncoding, MalformedDocument, VaultIOError

logger = logging.getLogger(__name__)


class Vault:
    """
    Mapa en memoria nombre -> secreto.
    Solo se persiste con una llamada explícita a save_vault.
    """

    def __init__(self, entries: Optional[dict] = None):
        self._entries = dict(entries or {})
        self.modified = False

    @classmethod
    def new(cls) -> "Vault":
        return new_vault()

    @classmethod
    def load(cls, path, password: str) -> "Vault":
        return load_vault(path, password)

    def save(self, path, password: str) -> None:
        save_vault(path, password, self)

    def get(self, name: str) -> Optional[str]:
        return self._entries.get(name)

    def set(self, name: str, secret: str) -> None:
        self._entries[name] = secret
        self.modified = True

    def remove(self, name: str) -> None:
        # No-op si no existe
        if self._entries.pop(name, None) is not None:
            self.modified = True

    def list_names(self) -> Set[str]:
        return set(self._entries)

    def to_dict(self) -> dict:
        return dict(self._entries)

    def __len__(self):
        return len(self._entries)

    def __contains__(self, name):
        return name in self._entries

    def __eq__(self, other):
        if not isinstance(other, Vault):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self):
        # Nunca mostrar los secretos
        return f"<Vault names={sorted(self._entries)!r}>"


def new_vault() -> Vault:
    """Devuelve un vault vacío."""
    return Vault()


def _check_entries(entries: dict) -> None:
    """Nombres de texto no vacíos y secretos de texto; si no, MalformedDocument."""
    for name, secret in entries.items():
        if not isinstance(name, str) or not name:
            raise MalformedDocument(f"Nombre de entrada inválido: {name!r}")
        if not isinstance(secret, str):
            raise MalformedDocument(f"El secreto de '{name}' no es texto")


def _parse_document(plaintext: bytes) -> dict:
    """Decodifica UTF-8 y parsea el JSON nombre -> secreto."""
    try:
        text = plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncoding("Datos inválidos: el contenido no es UTF-8") from e
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Documento JSON inválido: {e.msg}") from e
    if not isinstance(doc, dict):
        raise MalformedDocument("El documento no es un objeto JSON")
    _check_entries(doc)
    return doc


def load_vault(path, password: str) -> Vault:
    """
    Lee el fichero cifrado en 'path', lo descifra usando 'password'
    y devuelve el vault. Si el fichero no existe devuelve un vault vacío.
    """
    vault_p = Path(path)
    # Leer datos crudos
    try:
        data = vault_p.read_bytes()
    except FileNotFoundError:
        logger.debug("No existe %s, vault vacío", vault_p)
        return new_vault()
    except OSError as e:
        raise VaultIOError(f"No se pudo leer el vault '{vault_p}': {e}") from e
    # Separar salt, iv y ciphertext
    salt, iv, ciphertext = decode_blob(data)
    # Derivar clave y descifrar; la clave se borra al salir
    with derived_key(password, salt) as key:
        plaintext = decrypt_data(key, iv, ciphertext)
    entries = _parse_document(plaintext)
    logger.debug("Vault %s cargado: %d entradas", vault_p, len(entries))
    return Vault(entries)


def _fsync_dir(directory: Path) -> None:
    """Hace persistente el renombrado en el directorio."""
    fd = os.open(str(directory), os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def _write_atomic(path: Path, data: bytes) -> None:
    """Escribe en un fichero temporal del mismo directorio y lo renombra."""
    directory = path.parent
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(directory)
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o600)  # Permisos restrictivos
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    _fsync_dir(directory)


def save_vault(path, password: str, vault: Vault) -> None:
    """
    Cifra y escribe el vault en 'path' con salt e iv nuevos en cada guardado,
    reemplazando el contenido anterior. Un vault que load_vault no podría
    leer se rechaza antes de tocar el fichero.
    """
    vault_p = Path(path)
    entries = vault.to_dict()
    _check_entries(entries)
    # Serializar
    plaintext = json.dumps(entries).encode("utf-8")
    salt = os.urandom(_SALT_SIZE)
    iv = os.urandom(_IV_SIZE)
    with derived_key(password, salt) as key:
        ciphertext = encrypt_data(key, iv, plaintext)
    # Sobrescribir fichero: salt + iv + ciphertext
    try:
        _write_atomic(vault_p, encode_blob(salt, iv, ciphertext))
    except OSError as e:
        raise VaultIOError(f"No se pudo escribir el vault '{vault_p}': {e}") from e
    vault.modified = False
    logger.debug("Vault %s guardado: %d entradas", vault_p, len(vault))
