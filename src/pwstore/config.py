import os
from pathlib import Path

# Ruta por defecto del vault, relativa a la home del usuario
DEFAULT_VAULT_FILE = Path.home() / ".pwn.dat"
VAULT_PATH_ENVVAR = "PWSTORE_PATH"


def default_vault_path() -> Path:
    """Ruta del vault: $PWSTORE_PATH si está definida, si no ~/.pwn.dat."""
    env = os.environ.get(VAULT_PATH_ENVVAR)
    if env:
        return Path(env).expanduser()
    return DEFAULT_VAULT_FILE
