"""
benchmark.py
Script de benchmark para medir el tiempo de desbloqueo del vault.
"""

import time
import argparse

from pwstore.storage import Vault, load_vault, save_vault


def generate_dummy_vault(path: str, master_pw: str, entries: int = 1000):
    """
    Genera un vault cifrado con 'entries' entradas de relleno.
    """
    store = Vault()
    for i in range(entries):
        store.set(f"entry-{i}", "p" * 50)
    save_vault(path, master_pw, store)


def benchmark_unlock(path: str, master_pw: str, iterations: int = 10):
    """
    Mide el tiempo medio de desbloqueo (load_vault) en vault existente.
    """
    times = []
    for _ in range(iterations):
        start = time.time()
        load_vault(path, master_pw)
        times.append(time.time() - start)
    avg = sum(times) / len(times)
    print(f"Unlock average over {iterations} runs: {avg:.4f}s")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Benchmark de vault: genera y mide unlock."
    )
    parser.add_argument("--path", default="vault.dat", help="Ruta del vault cifrado")
    parser.add_argument(
        "--pw", default="benchmark", help="Contraseña maestra para el vault"
    )
    parser.add_argument(
        "--entries", type=int, default=1000, help="Número de entradas de relleno"
    )
    parser.add_argument("--iter", type=int, default=10, help="Número de iteraciones")
    args = parser.parse_args()
    generate_dummy_vault(args.path, args.pw, args.entries)
    benchmark_unlock(args.path, args.pw, args.iter)
