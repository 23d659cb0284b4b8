"""pwgen — command-line front end for the encrypted password vault.

Commands
--------
  generate  Print a freshly generated password
  init      Create a new encrypted storage file
  add       Store a password for a service/login pair
  get       Copy a stored password to the clipboard, or list everything
  update    Replace the password of a stored entry
  delete    Remove a stored entry
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Iterator, Optional

import pyperclip
import typer
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt
from rich.table import Table
from rich.theme import Theme

from . import __version__, clipboard, config
from .errors import PwgenError
from .generator import DEFAULT_LENGTH, DEFAULT_SYMBOLS, generate_password
from .models import PasswordEntry, Vault
from .records import (
    add_record,
    delete_record,
    ensure_unique,
    find_records,
    list_records,
    resolve,
    select_by_index,
    update_password,
)
from .store import VaultStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App & consoles
# ---------------------------------------------------------------------------

_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "danger": "bold red",
        "muted": "dim",
        "label": "cyan",
    }
)

console = Console(theme=_THEME)
err = Console(stderr=True, theme=_THEME)

app = typer.Typer(
    name="pwgen",
    help="[bold cyan]pwgen[/bold cyan] — generate passwords and keep them in an encrypted vault.",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
)

StorageOption = Annotated[
    Optional[Path],
    typer.Option("--storage", help="Vault file path (overrides PWGEN_STORAGE).", show_default=False),
]
LengthOption = Annotated[int, typer.Option("--length", "-l", help="Generated password length (6-30).")]
UseSymbolsOption = Annotated[
    bool, typer.Option("--use-symbols", "-u", help="Include special characters in generated passwords.")
]

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


@contextmanager
def _errors() -> Iterator[None]:
    """Report any :class:`PwgenError` on stderr and exit with status 1."""
    try:
        yield
    except PwgenError as exc:
        logger.debug("Command failed", exc_info=exc)
        err.print(f"[danger]{escape(str(exc))}[/danger]")
        raise typer.Exit(1) from exc


def _store(storage: Optional[Path]) -> VaultStore:
    return VaultStore(config.storage_path(storage))


def _ask_passphrase(prompt: str = "Enter master password") -> str:
    return typer.prompt(prompt, hide_input=True)


def _ask_new_password(prompt: str) -> str:
    password = typer.prompt(prompt, hide_input=True)
    if not password:
        err.print("[danger]Password cannot be empty.[/danger]")
        raise typer.Exit(1)
    return password


def _unlock(storage: Optional[Path]) -> tuple[VaultStore, Vault, str]:
    """Prompt for the master passphrase and return (store, vault, passphrase)."""
    store = _store(storage)
    passphrase = _ask_passphrase()
    vault = store.load(passphrase)
    return store, vault, passphrase


def _choose(candidates: list[PasswordEntry], service: str, action: str) -> PasswordEntry:
    """Return the single match, or ask the user to pick one by number."""
    entry = resolve(candidates, service)
    if entry is not None:
        return entry

    console.print(f"Multiple entries found for [bold]{service}[/bold]:")
    for i, candidate in enumerate(candidates, 1):
        console.print(f"  [muted]{i}.[/muted] Login: {candidate.login}")
    index = IntPrompt.ask(f"Enter number to {action}", console=console)
    return select_by_index(candidates, index)


def _password_for(generate: bool, length: int, use_symbols: bool, prompt: str) -> str:
    if generate:
        password = generate_password(length, DEFAULT_SYMBOLS, use_symbols)
        console.print(f"  [muted]Generated password:[/muted] [bold green]{escape(password)}[/bold green]")
        return password
    return _ask_new_password(prompt)


def _copy(text: str, timeout: int) -> None:
    try:
        clipboard.copy(text)
    except pyperclip.PyperclipException as exc:
        logger.debug("Clipboard copy failed: %s", exc)
        console.print("[warning]Could not access clipboard.[/warning]")
        return
    console.print("[success]Password has been copied to clipboard.[/success]")
    if clipboard.schedule_clear(text, timeout):
        console.print(f"[muted]Clipboard will be cleared in {timeout} seconds.[/muted]")


def _render_table(entries: list[PasswordEntry]) -> None:
    table = Table(box=box.ROUNDED, header_style="bold cyan", row_styles=["", "dim"])
    table.add_column("Service", style="bold white", max_width=15, overflow="ellipsis")
    table.add_column("Login", max_width=20, overflow="ellipsis")
    table.add_column("URL", style="blue", max_width=30, overflow="ellipsis")
    table.add_column("Note", style="italic", max_width=30, overflow="ellipsis")

    for e in entries:
        table.add_row(e.service, e.login, e.url, e.note)
    console.print(table)


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=err, show_path=False, rich_tracebacks=True)
    root = logging.getLogger("pwgen")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"pwgen {__version__}")
        raise typer.Exit()


@app.callback()
def _main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr.")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = None,
) -> None:
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def generate(
    length: LengthOption = DEFAULT_LENGTH,
    symbols: Annotated[
        str, typer.Option("--symbols", "-s", help="Special symbols to draw from with --use-symbols.")
    ] = DEFAULT_SYMBOLS,
    use_symbols: UseSymbolsOption = False,
    copy: Annotated[bool, typer.Option("--copy", "-c", help="Copy the password to the clipboard.")] = False,
) -> None:
    """Generate a password and print it."""
    password = generate_password(length, symbols, use_symbols)
    console.print(password, markup=False, highlight=False)
    if copy:
        _copy(password, config.clipboard_timeout())


@app.command()
def init(
    storage: StorageOption = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing vault without asking.")] = False,
) -> None:
    """Create a new, empty encrypted vault."""
    with _errors():
        store = _store(storage)
        overwrite = force
        if store.exists() and not force:
            overwrite = Confirm.ask(
                "[warning]Password storage already exists. Overwrite it?[/warning]",
                default=False,
                console=console,
            )
            if not overwrite:
                console.print("[muted]Operation cancelled.[/muted]")
                raise typer.Exit(0)

        console.print(
            "[warning]WARNING:[/warning] if you forget your master password, "
            "your stored passwords [bold]cannot[/bold] be recovered."
        )
        passphrase = _ask_passphrase()
        if not passphrase:
            err.print("[danger]Master password cannot be empty.[/danger]")
            raise typer.Exit(1)
        if passphrase != _ask_passphrase("Confirm master password"):
            err.print("[danger]Passwords don't match. Please try again.[/danger]")
            raise typer.Exit(1)

        store.init(passphrase, overwrite=overwrite)
        console.print(f"[success]Password storage initialized →[/success] [bold]{store.path}[/bold]")


@app.command()
def add(
    service: Annotated[str, typer.Argument(help="Service name, e.g. github.")],
    login: Annotated[str, typer.Argument(help="Login or email for the service.")],
    url: Annotated[str, typer.Option("--url", help="Associated URL.")] = "",
    note: Annotated[str, typer.Option("--note", "-n", help="Free-form note.")] = "",
    generate: Annotated[bool, typer.Option("--generate", "-g", help="Generate the password.")] = False,
    length: LengthOption = DEFAULT_LENGTH,
    use_symbols: UseSymbolsOption = False,
    storage: StorageOption = None,
) -> None:
    """Store a password for SERVICE and LOGIN."""
    with _errors():
        store, vault, passphrase = _unlock(storage)
        # fail on duplicates before asking for the password
        ensure_unique(vault, service, login)

        password = _password_for(generate, length, use_symbols, "Enter password to store")
        add_record(vault, service, login, password, url, note)
        store.save(vault, passphrase)
        console.print(f"[success]Password for {service} with login {login} saved successfully.[/success]")


@app.command()
def get(
    service: Annotated[Optional[str], typer.Argument(help="Service name or part of it.")] = None,
    list_all: Annotated[bool, typer.Option("--list", help="List every stored entry.")] = False,
    timeout: Annotated[
        Optional[int],
        typer.Option("--timeout", "-t", help="Seconds before the clipboard is cleared (0 = never).", show_default=False),
    ] = None,
    storage: StorageOption = None,
) -> None:
    """Copy the password for SERVICE to the clipboard, or --list everything."""
    if not list_all and not service:
        err.print("[danger]Please specify a service or the --list option.[/danger]")
        raise typer.Exit(1)

    with _errors():
        _, vault, _ = _unlock(storage)

        if list_all:
            entries = list_records(vault)
            if not entries:
                console.print("[muted]No passwords stored.[/muted]")
                return
            _render_table(entries)
            return

        entry = _choose(find_records(vault, service, exact=False), service, "copy password")
        console.print(f"[label]Service:[/label] {entry.service}")
        if entry.url:
            console.print(f"[label]Url:[/label] {entry.url}")
        console.print(f"[label]Login:[/label] {entry.login}")
        _copy(entry.password, config.clipboard_timeout(timeout))


@app.command()
def update(
    service: Annotated[str, typer.Argument(help="Exact service name.")],
    login: Annotated[Optional[str], typer.Option("--login", help="Exact login, to skip disambiguation.")] = None,
    generate: Annotated[bool, typer.Option("--generate", "-g", help="Generate the new password.")] = False,
    length: LengthOption = DEFAULT_LENGTH,
    use_symbols: UseSymbolsOption = False,
    storage: StorageOption = None,
) -> None:
    """Replace the password stored for SERVICE."""
    with _errors():
        store, vault, passphrase = _unlock(storage)
        entry = _choose(find_records(vault, service, exact=True, login=login), service, "update")

        password = _password_for(generate, length, use_symbols, "Enter new password")
        update_password(vault, entry, password)
        store.save(vault, passphrase)
        console.print(
            f"[success]Password for {entry.service} with login {entry.login} updated successfully.[/success]"
        )


@app.command()
def delete(
    service: Annotated[str, typer.Argument(help="Exact service name.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt.")] = False,
    storage: StorageOption = None,
) -> None:
    """Permanently delete a stored entry for SERVICE."""
    with _errors():
        store, vault, passphrase = _unlock(storage)
        entry = _choose(find_records(vault, service, exact=True), service, "delete")

        confirmed = yes or Confirm.ask(
            f"Delete password for [bold]{entry.service}[/bold] with login [bold]{entry.login}[/bold]?",
            default=False,
            console=console,
        )
        if not confirmed:
            console.print("[muted]Operation cancelled.[/muted]")
            raise typer.Exit(0)

        delete_record(vault, entry, confirmed=True)
        store.save(vault, passphrase)
        console.print(
            f"[danger]Password for {entry.service} with login {entry.login} deleted.[/danger]"
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    app()


if __name__ == "__main__":
    main()
