import typer

from .._version import __version__
from .classify import classify_command
from .config import app as config_app
from .export import export_path_command, export_plan_command
from .rules import app as rules_app


__all__ = ["app", "run"]


app = typer.Typer(help="Classificação determinística de fotos de obra", add_completion=False)


@app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Mostra a versão do fotobra e sai", is_eager=True),
) -> None:
    """Handle global options before any sub-command executes."""

    if version:
        typer.echo(f"fotobra {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.command("classify", help="Classifica um lote de fotos (JSONL) e propaga por pasta.")(classify_command)
app.command("export-path", help="Calcula o caminho de exportação de uma foto.")(export_path_command)
app.command("export-plan", help="Gera o plano de exportação de um lote classificado.")(export_plan_command)
app.add_typer(config_app, name="config")
app.add_typer(rules_app, name="rules")


def run() -> None:
    """Entry point compatible with ``python -m fotobra.cli.main`` and console scripts."""

    from typer.main import get_command

    cli = get_command(app)
    cli()


if __name__ == "__main__":
    run()
