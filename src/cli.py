"""Operator console for the site content."""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from generalis.auth import DENIED_MESSAGE, AuthState
from generalis.config import load_config
from generalis.content.defaults import default_content
from generalis.content.models import ContentDocument
from generalis.editor.paths import ListPath
from generalis.editor.session import EditableSession
from generalis.enrichment.images import file_to_data_url
from generalis.errors import (
    AccessDenied,
    ConfigError,
    InvalidEdit,
    SaveFailed,
    StoreUnavailable,
)
from generalis.site import SiteContent
from generalis.store import PostgresGateway

app = typer.Typer(
    name="generalis",
    help="Manage the content of the Generali's Bar & Kitchen website.",
)
captions_app = typer.Typer(help="AI caption suggestions for gallery images.")
app.add_typer(captions_app, name="captions")

console = Console()

SecretOption = Annotated[
    str,
    typer.Option(
        "--secret",
        prompt="Secret key",
        hide_input=True,
        help="Admin secret key.",
    ),
]

ImageFileOption = Annotated[
    Optional[Path],
    typer.Option(
        "--file",
        "-f",
        help="Local image to embed as a data: URL.",
        exists=True,
        dir_okay=False,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from generalis import __version__

        console.print(f"generalis {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .generalis.toml file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show log output."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Generali's site content - view, edit and caption."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    ctx.obj = {"config": config}


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def _site(ctx: typer.Context, *, captions: bool = False) -> SiteContent:
    """Build the site from config, exiting on a broken configuration."""
    try:
        config = load_config(ctx.obj["config"])
        site = SiteContent.from_config(config)
    except (ConfigError, ValueError) as exc:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(exc))}")
        raise typer.Exit(1) from exc
    if captions and not config.captions.is_configured:
        console.print(
            "[yellow]No Gemini API key configured (GOOGLE_AI_API_KEY); "
            "placeholder captions will be used.[/yellow]"
        )
    return site


def _unlock(site: SiteContent, secret: str) -> AuthState:
    auth = AuthState(session={})
    if not site.gate(auth).unlock(secret):
        _fail(DENIED_MESSAGE)
    return auth


def _image_ref(path: Path) -> str:
    try:
        return file_to_data_url(path)
    except (ValueError, OSError) as exc:
        _fail(str(exc))


def _edit(
    ctx: typer.Context,
    secret: str,
    mutate: Callable[[EditableSession], None],
    *,
    fill_captions: bool = False,
) -> None:
    """Unlock, apply *mutate* to a fresh session, and commit."""
    site = _site(ctx, captions=fill_captions)
    auth = _unlock(site, secret)
    try:
        session = site.open_editor(auth)
        mutate(session)
        if fill_captions:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Generating captions...", total=None)

                def _report(done: int, total: int) -> None:
                    progress.update(task, description=f"Generated caption {done}/{total}")

                site.save(session, fill_captions=True, on_progress=_report)
        else:
            site.save(session)
    except (AccessDenied, InvalidEdit) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    except SaveFailed as exc:
        console.print(f"[red]Error:[/red] {escape(exc.cause)}")
        console.print("Your changes were not saved. Fix the problem and try again.")
        raise typer.Exit(1) from exc
    console.print("[green]Changes saved.[/green]")


@app.command()
def show(
    ctx: typer.Context,
    section: Annotated[
        Optional[str],
        typer.Argument(help="Only show this section (e.g. hero, gallery)."),
    ] = None,
) -> None:
    """Print the current site content as JSON."""
    payload = _site(ctx).content.to_payload()
    if section is not None:
        if section not in payload:
            console.print(f"[red]Error:[/red] Unknown section: {section}")
            console.print(f"Sections: {', '.join(payload)}")
            raise typer.Exit(1)
        payload = payload[section]
    console.print_json(data=payload)


@app.command(name="set")
def set_cmd(
    ctx: typer.Context,
    field: Annotated[str, typer.Argument(help="hero.title, hero.subtitle, about, specials, contact.address or contact.phone.")],
    value: Annotated[str, typer.Argument(help="New text.")],
    secret: SecretOption,
) -> None:
    """Replace a text field."""
    _edit(ctx, secret, lambda s: s.set_field(field, value))


@app.command()
def category(
    ctx: typer.Context,
    menu: Annotated[str, typer.Argument(help="overview or fullMenu.")],
    index: Annotated[int, typer.Argument(help="Zero-based position of the category.")],
    title: Annotated[str, typer.Argument(help="New category title.")],
    secret: SecretOption,
) -> None:
    """Rename a menu category."""
    _edit(ctx, secret, lambda s: s.set_category_title(menu, index, title))


@app.command()
def add(
    ctx: typer.Context,
    list_path: Annotated[str, typer.Argument(metavar="LIST", help="events, gallery, testimonials, team or menu.<overview|fullMenu>[N].items.")],
    secret: SecretOption,
    item_json: Annotated[
        Optional[str],
        typer.Option("--json", help="Item as a JSON object. Defaults to a blank entry."),
    ] = None,
    image_file: ImageFileOption = None,
) -> None:
    """Append an element to a list, optionally with an uploaded image."""
    item: dict | None = None
    if item_json is not None:
        try:
            item = json.loads(item_json)
        except json.JSONDecodeError as exc:
            console.print(f"[red]Error:[/red] --json is not valid JSON: {exc}")
            raise typer.Exit(1) from exc
    image = _image_ref(image_file) if image_file is not None else None

    def _add(session: EditableSession) -> None:
        index = session.add_list_item(list_path, item)
        if image is not None:
            field = ListPath.parse(list_path).image_field
            if field is None:
                raise InvalidEdit(f"{list_path} items have no image")
            session.update_list_item(list_path, index, field, image)

    _edit(ctx, secret, _add)


@app.command()
def update(
    ctx: typer.Context,
    list_path: Annotated[str, typer.Argument(metavar="LIST")],
    index: Annotated[int, typer.Argument(help="Zero-based position in the list.")],
    field: Annotated[str, typer.Argument(help="Field of the element, e.g. caption.")],
    secret: SecretOption,
    value: Annotated[Optional[str], typer.Argument(help="New value. Omit when using --file.")] = None,
    image_file: ImageFileOption = None,
) -> None:
    """Change one field of a list element."""
    if (value is None) == (image_file is None):
        _fail("Give either VALUE or --file.")
    new_value = value if image_file is None else _image_ref(image_file)
    _edit(ctx, secret, lambda s: s.update_list_item(list_path, index, field, new_value))


@app.command()
def remove(
    ctx: typer.Context,
    list_path: Annotated[str, typer.Argument(metavar="LIST")],
    index: Annotated[int, typer.Argument(help="Zero-based position in the list.")],
    secret: SecretOption,
) -> None:
    """Remove an element from a list.  Later elements move up."""
    _edit(ctx, secret, lambda s: s.remove_list_item(list_path, index))


@app.command()
def rules(
    ctx: typer.Context,
    secret: SecretOption,
    lines: Annotated[
        Optional[list[str]],
        typer.Argument(help="One argument per house rule. Give none to clear the list."),
    ] = None,
) -> None:
    """Replace the house rules."""
    _edit(ctx, secret, lambda s: s.set_rules(lines or []))


@app.command(name="export")
def export_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Where to write the JSON document.")],
) -> None:
    """Write the current content to a JSON file."""
    payload = _site(ctx).content.to_payload()
    try:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        _fail(f"Cannot write {path}: {exc}")
    console.print(f"[green]Exported content to {path}[/green]")


@app.command(name="import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="JSON document to store.", exists=True, dir_okay=False),
    ],
    secret: SecretOption,
) -> None:
    """Replace the stored content with a JSON document."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Error:[/red] Cannot read {path}: {escape(str(exc))}")
        raise typer.Exit(1) from exc
    try:
        document = ContentDocument.from_payload(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        console.print(f"[red]Error:[/red] Not a valid content document: {path}")
        raise typer.Exit(1) from exc
    _replace(ctx, secret, document)


@app.command()
def reset(ctx: typer.Context, secret: SecretOption) -> None:
    """Replace the stored content with the built-in defaults."""
    _replace(ctx, secret, default_content())


def _replace(ctx: typer.Context, secret: str, document: ContentDocument) -> None:
    site = _site(ctx)
    auth = _unlock(site, secret)
    try:
        site.replace(document, auth)
    except SaveFailed as exc:
        console.print(f"[red]Error:[/red] {escape(exc.cause)}")
        raise typer.Exit(1) from exc
    console.print("[green]Content replaced.[/green]")


@app.command(name="init-db")
def init_db(ctx: typer.Context) -> None:
    """Create the PostgreSQL settings table."""
    site = _site(ctx)
    if not isinstance(site.gateway, PostgresGateway):
        console.print("[yellow]Storage backend is not postgres; nothing to do.[/yellow]")
        raise typer.Exit(0)
    try:
        site.gateway.ensure_schema()
    except StoreUnavailable as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    console.print("[green]Database table ready.[/green]")


@captions_app.command()
def suggest(
    ctx: typer.Context,
    image: Annotated[
        Optional[str],
        typer.Argument(help="Image URL, data: URL, or local file."),
    ] = None,
    gallery: Annotated[
        Optional[int],
        typer.Option("--gallery", "-g", help="Use the gallery image at this position instead."),
    ] = None,
) -> None:
    """Print caption suggestions for an image."""
    if (image is None) == (gallery is None):
        _fail("Give either IMAGE or --gallery N.")
    site = _site(ctx, captions=True)
    if gallery is not None:
        images = site.content.gallery
        if not 0 <= gallery < len(images):
            _fail(f"No gallery image {gallery} ({len(images)} image(s))")
        ref = images[gallery].src
    else:
        ref = image  # type: ignore[assignment]
        local = Path(ref)
        if not ref.startswith(("http://", "https://", "data:")) and local.is_file():
            ref = _image_ref(local)
    for caption in site.captions.suggest_captions(ref):  # type: ignore[union-attr]
        console.print(f"- {caption}")


@captions_app.command()
def fill(ctx: typer.Context, secret: SecretOption) -> None:
    """Generate captions for gallery images that have none, then save."""
    _edit(ctx, secret, lambda s: None, fill_captions=True)
