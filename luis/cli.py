import json
import typer
import asyncio
from typing import Optional
from luis.core.config import Config
from luis.core.contracts import PredictionResult
from luis.core.errors import LUISError
from luis.app import format_result, main as app_main

app = typer.Typer(help="LUIS prediction client CLI")

APP_ID = typer.Option(None, "--app-id", help="Application Id (default: LUIS_APP_ID)")
APP_KEY = typer.Option(None, "--app-key", help="Subscription Key (default: LUIS_APP_KEY)")
PREVIEW = typer.Option(None, "--preview/--no-preview", help="Use the preview endpoint")
VERBOSE = typer.Option(None, "--verbose/--no-verbose", help="Ask for every intent, not only the top one")


def _client(app_id, app_key, preview, verbose):
    try:
        return Config.get_client(app_id=app_id, app_key=app_key, preview=preview, verbose=verbose)
    except LUISError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _show(result: PredictionResult, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo(format_result(result))


@app.command("predict")
def predict(
    text: str,
    app_id: Optional[str] = APP_ID,
    app_key: Optional[str] = APP_KEY,
    preview: Optional[bool] = PREVIEW,
    verbose: Optional[bool] = VERBOSE,
    as_json: bool = typer.Option(False, "--json", help="Print the normalized JSON"),
):
    """Predict the intent of TEXT and print the result."""
    client = _client(app_id, app_key, preview, verbose)
    try:
        result = asyncio.run(client.predict(text))
    except LUISError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    _show(result, as_json)


@app.command("reply")
def reply(
    text: str,
    context_id: str = typer.Option(..., "--context-id", "-c", help="Context Id of the dialog to continue"),
    app_id: Optional[str] = APP_ID,
    app_key: Optional[str] = APP_KEY,
    verbose: Optional[bool] = VERBOSE,
    as_json: bool = typer.Option(False, "--json", help="Print the normalized JSON"),
):
    """Answer the prompt of dialog CONTEXT_ID with TEXT (preview endpoint)."""
    client = _client(app_id, app_key, True, verbose)
    prior = {"dialog": {"contextId": context_id}}
    try:
        result = asyncio.run(client.reply(text, prior))
    except LUISError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    _show(result, as_json)


@app.command("run")
def run_session(
    app_id: Optional[str] = APP_ID,
    app_key: Optional[str] = APP_KEY,
    verbose: Optional[bool] = VERBOSE,
):
    """Run an interactive prediction/dialog session (preview endpoint)."""
    client = _client(app_id, app_key, True, verbose)
    asyncio.run(app_main(client))


@app.command("config")
def show_config():
    """Print the current configuration."""
    Config.print_config()


if __name__ == "__main__":
    app()
