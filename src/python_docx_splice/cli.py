"""Command-line interface for python-docx-splice.

Provides commands for inspecting and editing paragraph text by character
offset from the terminal.
"""

from pathlib import Path
from typing import Annotated

import typer

from . import Document, __version__
from .errors import DocxSpliceError

app = typer.Typer(
    name="docx-splice",
    help="Insert and delete text in Word documents by character offset.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docx-splice version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Insert and delete text in Word documents by character offset."""
    pass


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def text(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    paragraph: Annotated[
        int | None, typer.Option("--paragraph", "-p", help="Only show this paragraph")
    ] = None,
) -> None:
    """Show paragraph texts with their numbers."""
    try:
        with Document(str(file)) as doc:
            if paragraph is not None:
                typer.echo(f"{paragraph}: {doc.paragraph(paragraph).text!r}")
                return
            for number, para in enumerate(doc.paragraphs):
                typer.echo(f"{number}: {para.text!r}")
    except (DocxSpliceError, IndexError) as e:
        _fail(e)


@app.command()
def runs(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    paragraph: Annotated[int, typer.Option("--paragraph", "-p", help="Paragraph number")],
) -> None:
    """Show the runs of a paragraph with their character offsets."""
    try:
        with Document(str(file)) as doc:
            for run in doc.paragraph(paragraph).runs:
                typer.echo(f"[{run.start_index}:{run.end_index}] {run.value!r}")
    except (DocxSpliceError, IndexError) as e:
        _fail(e)


@app.command()
def insert(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    paragraph: Annotated[int, typer.Option("--paragraph", "-p", help="Paragraph number")],
    index: Annotated[int, typer.Option("--index", "-i", help="Character offset")],
    text: Annotated[str, typer.Option("--text", "-t", help="Text to insert")],
    track: Annotated[bool, typer.Option("--track", help="Record as a tracked change")] = False,
    author: Annotated[
        str | None, typer.Option("--author", help="Author name for tracked change")
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Insert text into a paragraph at a character offset."""
    try:
        with Document(str(file), author=author or "CLI User") as doc:
            doc.insert_text(paragraph, index, text, track=track)
            output_path = output or file
            doc.save(str(output_path))
        typer.echo(f"Inserted {len(text)} character(s) and saved to {output_path}")
    except (DocxSpliceError, IndexError) as e:
        _fail(e)


@app.command()
def delete(
    file: Annotated[Path, typer.Argument(help="Path to the .docx file")],
    paragraph: Annotated[int, typer.Option("--paragraph", "-p", help="Paragraph number")],
    index: Annotated[int, typer.Option("--index", "-i", help="Character offset")],
    count: Annotated[int, typer.Option("--count", "-c", help="Number of characters")],
    track: Annotated[bool, typer.Option("--track", help="Record as a tracked change")] = False,
    author: Annotated[
        str | None, typer.Option("--author", help="Author name for tracked change")
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Delete characters from a paragraph."""
    try:
        with Document(str(file), author=author or "CLI User") as doc:
            doc.remove_text(paragraph, index, count, track=track)
            output_path = output or file
            doc.save(str(output_path))
        typer.echo(f"Deleted {count} character(s) and saved to {output_path}")
    except (DocxSpliceError, IndexError) as e:
        _fail(e)


if __name__ == "__main__":
    app()
