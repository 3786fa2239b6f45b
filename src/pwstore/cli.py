import click
from click.shell_completion import get_completion_class

import sys
import logging
import secrets
import string

from pathlib import Path

from pwstore.config import VAULT_PATH_ENVVAR, default_vault_path
from pwstore.errors import (
    CorruptData,
    DecryptionFailed,
    InvalidEncoding,
    MalformedDocument,
    VaultError,
    VaultIOError,
)
from pwstore.storage import load_vault, save_vault

try:
    import pyperclip

    HAS_CLIPBOARD = True
except ImportError:
    HAS_CLIPBOARD = False

logger = logging.getLogger(__name__)

_DEFAULT_GENERATED_LENGTH = 20

# Mensaje para cada tipo de error del vault
_ERROR_MESSAGES = {
    VaultIOError: "[ERROR] No se pudo acceder al fichero del vault",
    CorruptData: "[ERROR] El fichero del vault está corrupto",
    DecryptionFailed: "Contraseña maestra incorrecta o vault manipulado",
    InvalidEncoding: "[ERROR] El contenido descifrado no es texto válido",
    MalformedDocument: "[ERROR] El contenido descifrado no tiene un formato válido",
}


def path_option(f):
    return click.option(
        "--path",
        default=lambda: str(default_vault_path()),
        envvar=VAULT_PATH_ENVVAR,
        show_default="~/.pwn.dat",
        help="Ruta del fichero cifrado",
    )(f)


def _fail(err: VaultError):
    """Informa del error según su tipo y termina con código 1."""
    prefix = _ERROR_MESSAGES.get(type(err), "[ERROR] Operación fallida")
    logger.debug("Fallo del vault: %s", err)
    click.secho(f"{prefix}: {err}", fg="red", bold=True)
    sys.exit(1)


def _prompt_master() -> str:
    return click.prompt("Contraseña maestra", hide_input=True)


def _load(path: str, password: str):
    try:
        return load_vault(path, password)
    except VaultError as e:
        _fail(e)


def _save(path: str, password: str, store) -> None:
    try:
        save_vault(path, password, store)
    except VaultError as e:
        _fail(e)


def _copy_to_clipboard(value: str) -> None:
    if HAS_CLIPBOARD:
        pyperclip.copy(value)
        click.secho("(Copiada al portapapeles)", fg="green")
    else:
        click.secho("[!] pyperclip no está instalado, no se puede copiar.", fg="yellow")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Muestra mensajes de depuración")
def cli(verbose):
    """Almacén local de contraseñas cifrado."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


# Comando explícito para autocompletado
@cli.command()
@click.argument(
    "shell",
    required=True,
    type=click.Choice(["bash", "zsh", "fish"]),
)
def completion(shell):
    """
    Genera el script de autocompletado para el shell dado.
    """
    comp_cls = get_completion_class(shell)
    comp = comp_cls(cli, {}, "pwstore", "_PWSTORE_COMPLETE")
    click.echo(comp.source())


@cli.command()
@path_option
@click.argument("name")
@click.argument("secret", required=False)
@click.option(
    "--generate", is_flag=True, help="Genera una contraseña segura automáticamente"
)
@click.option(
    "--length",
    default=_DEFAULT_GENERATED_LENGTH,
    show_default=True,
    type=click.IntRange(min=4),
    help="Longitud de la contraseña generada",
)
def add(path, name, secret, generate, length):
    """
    Guarda la contraseña NAME. Si no se da SECRET se pide por teclado.
    """
    if not name:
        click.secho("[!] El nombre no puede estar vacío.", fg="red")
        sys.exit(1)

    password = _prompt_master()
    store = _load(path, password)

    if generate:
        alphabet = string.ascii_letters + string.digits + string.punctuation
        secret = "".join(secrets.choice(alphabet) for _ in range(length))
        click.secho(f"Contraseña generada: {secret}", fg="cyan")
        if HAS_CLIPBOARD:
            _copy_to_clipboard(secret)
    elif secret is None:
        secret = click.prompt(
            "Contraseña para la entrada",
            hide_input=True,
            confirmation_prompt=True,
        )

    store.set(name, secret)
    _save(path, password, store)

    click.secho(f'✅ La contraseña de "{name}" se ha guardado.', fg="green", bold=True)


@cli.command()
@path_option
@click.argument("name")
@click.option("--copy", is_flag=True, help="Copia la contraseña al portapapeles")
def get(path, name, copy):
    """
    Muestra la contraseña NAME.
    """
    password = _prompt_master()
    store = _load(path, password)

    secret = store.get(name)
    if secret is None:
        click.secho(f'[!] No se encontró la entrada "{name}".', fg="yellow")
        return

    if copy:
        _copy_to_clipboard(secret)
    else:
        click.echo(f'Contraseña de "{name}": {secret}')


@cli.command()
@path_option
@click.argument("name")
def delete(path, name):
    """
    Elimina la contraseña NAME.
    """
    password = _prompt_master()
    store = _load(path, password)

    if name not in store:
        click.secho(f'[!] No se encontró la entrada "{name}".', fg="yellow")
        return

    store.remove(name)
    _save(path, password, store)
    click.secho(f'✅ La contraseña de "{name}" se ha eliminado.', fg="green", bold=True)


@cli.command()
@path_option
def show(path):
    """
    Lista los nombres guardados.
    """
    password = _prompt_master()
    store = _load(path, password)

    names = store.list_names()
    if not names:
        click.secho("No hay contraseñas guardadas.", fg="yellow")
        return

    click.secho("Nombres guardados:", fg="cyan", bold=True)
    for name in sorted(names):
        click.echo(f"- {name}")


@cli.command(name="delete-all")
@path_option
def delete_all(path):
    """
    Elimina DEFINITIVAMENTE el fichero del vault.
    """
    vault_p = Path(path)
    if not vault_p.exists():
        click.secho(f"[!] No se encontró el vault en '{path}'.", fg="red", bold=True)
        return

    click.secho(
        f"Vas a eliminar DEFINITIVAMENTE el vault '{path}' y todas sus contraseñas.",
        fg="red",
        bold=True,
    )
    confirm = click.prompt(
        "¿Estás seguro? Escribe 'BORRAR' para confirmar", default="no"
    )
    if confirm != "BORRAR":
        click.secho("Operación cancelada.", fg="yellow")
        return

    try:
        vault_p.unlink()
    except OSError as e:
        _fail(VaultIOError(f"No se pudo eliminar '{path}': {e}"))
    click.secho("✅ Los datos se han eliminado por completo.", fg="green", bold=True)


if __name__ == "__main__":
    cli()
