import os

import pytest

from pwstore.blob import encode_blob
from pwstore.crypto import _IV_SIZE, _SALT_SIZE, derived_key, encrypt_data


@pytest.fixture
def vault_file(tmp_path):
    return tmp_path / "vault.dat"


@pytest.fixture
def write_raw_vault():
    """Cifra 'plaintext' tal cual y lo escribe como fichero de vault."""

    def _write(path, password: str, plaintext: bytes):
        salt = os.urandom(_SALT_SIZE)
        iv = os.urandom(_IV_SIZE)
        with derived_key(password, salt) as key:
            ciphertext = encrypt_data(key, iv, plaintext)
        path.write_bytes(encode_blob(salt, iv, ciphertext))

    return _write
