"""CLI entrypoint: Typer app definition and command registration"""

import typer

from craftpub.cli.commands import list_cmd, publish_cmd


app = typer.Typer(name="craftpub", no_args_is_help=True, help="Publish Craft documents to Sanity")

app.command(name="publish")(publish_cmd)
app.command(name="list")(list_cmd)
