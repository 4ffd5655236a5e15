#!/usr/bin/env python3
"""
Generate a HASHED_PASSPHRASE value for passphrase authentication.

Usage:
    python scripts/generate_passphrase_hash.py "your passphrase here"
"""

import argparse
import sys

from rich.console import Console
from rich.panel import Panel

from vibeocm.core.config import settings
from vibeocm.core.security import hash_passphrase, verify_passphrase

console = Console()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Hash a passphrase for the HASHED_PASSPHRASE setting")
    parser.add_argument("passphrase", help="Passphrase to hash (leading/trailing spaces are ignored)")
    args = parser.parse_args(argv)

    passphrase = args.passphrase.strip()
    min_length = settings.security.passphrase_min_length
    if len(passphrase) < min_length:
        console.print(f"[red]Passphrase must be at least {min_length} characters long[/red]")
        return 1

    hashed = hash_passphrase(passphrase)
    if not verify_passphrase(passphrase, hashed):
        console.print("[red]Generated hash failed verification[/red]")
        return 1

    console.print(Panel(hashed, title="Hashed passphrase", expand=False))
    console.print("\nAdd this line to your .env file:\n")
    console.print(f"HASHED_PASSPHRASE={hashed}", markup=False, highlight=False)
    console.print("\n[yellow]Keep the plain passphrase secret; only share it with trusted users.[/yellow]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
