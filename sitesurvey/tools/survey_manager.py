import click
import json
from pathlib import Path

from pydantic import ValidationError

from ..catalog.catalog import CatalogLookup, InMemoryCatalog, NullCatalog
from ..config.settings import SurveySettings
from ..engine.cascade import CATALOG_KINDS
from ..engine.errors import SurveyError
from ..engine.session import SurveySession
from ..pricing.bom import bom_frame
from ..templates.survey_templates import (
    SurveyTemplateManager,
    buildings_to_document,
    read_survey_document,
    write_survey_document,
)
from ..utils.logger_config import setup_logging


def _load_catalog(catalog_path) -> CatalogLookup:
    if catalog_path:
        return InMemoryCatalog.from_yaml(catalog_path)
    return NullCatalog()


def _load_session(survey, catalog_path) -> SurveySession:
    try:
        return SurveySession.from_document(read_survey_document(survey), _load_catalog(catalog_path))
    except ValidationError as e:
        raise click.ClickException(f"Invalid survey document {survey}: {e}")


@click.group()
@click.option('--log-level', default=None, help='Nivel de logging (por defecto SURVEY_LOG_LEVEL)')
@click.pass_context
def cli(ctx, log_level):
    """Herramienta de gestión de levantamientos de infraestructura"""
    settings = SurveySettings.from_env()
    if log_level:
        settings.log_level = log_level.upper()
    setup_logging(settings.log_dir, settings.log_level, settings.json_logs)
    ctx.obj = settings


@cli.command()
@click.argument('survey', type=click.Path(exists=True))
@click.option('--catalog', '-c', type=click.Path(exists=True), help='Archivo YAML del catálogo')
@click.option('--format', 'output_format', type=click.Choice(['json', 'table']), default='table',
              help='Formato de salida')
@click.pass_obj
def rollup(settings, survey, catalog, output_format):
    """Muestra los productos y servicios asignados en todo el levantamiento"""
    session = _load_session(survey, catalog or settings.catalog_path)
    items = session.rollup()

    if output_format == 'json':
        click.echo(json.dumps(items.to_dict(), indent=2, ensure_ascii=False))
        return

    for title, records in (("Products", items.products), ("Services", items.services)):
        click.echo(f"{title}:")
        for record in records:
            click.echo(f"  {record.id}  {record.name}  x{record.quantity:g}  [{record.category}]")
            for location in record.locations:
                click.echo(f"      - {location}")


@cli.command()
@click.argument('survey', type=click.Path(exists=True))
@click.option('--catalog', '-c', type=click.Path(exists=True), help='Archivo YAML del catálogo')
@click.pass_obj
def price(settings, survey, catalog):
    """Genera la tabla de materiales valorada y sus totales"""
    session = _load_session(survey, catalog or settings.catalog_path)
    frame = bom_frame(session.rollup(), session.pricing)
    if frame.empty:
        click.echo("No assigned products or services")
    else:
        click.echo(frame.drop(columns=["locations"]).to_string(index=False))

    totals = session.totals()
    click.echo(f"Subtotal: {totals['subtotal']:.2f}")
    click.echo(f"Total: {totals['total']:.2f}")
    click.echo(f"Margin: {totals['margin_amount']:.2f} ({totals['average_margin_percent']:.1f}%)")


@cli.command()
@click.argument('survey', type=click.Path(exists=True))
@click.option('--kind', '-k', type=click.Choice(CATALOG_KINDS), required=True, help='Tipo de elemento')
@click.option('--id', 'catalog_id', required=True, help='Id del producto o servicio')
@click.option('--output', '-o', type=click.Path(), help='Archivo de salida (por defecto sobrescribe)')
def purge(survey, kind, catalog_id, output):
    """Elimina un producto o servicio de todo el levantamiento y de los precios"""
    session = _load_session(survey, None)
    try:
        session.remove_catalog_item(kind, catalog_id)
    except SurveyError as e:
        raise click.ClickException(str(e))

    output_file = output or survey
    write_survey_document(session.to_document(), output_file)
    click.echo(f"Removed {kind} {catalog_id}; survey written to {output_file}")


@cli.command('from-template')
@click.argument('template')
@click.argument('name')
@click.option('--templates-dir', '-t', type=click.Path(), default=None, help='Directorio de plantillas')
@click.option('--floors', '-f', type=int, default=None, help='Número de pisos')
@click.option('--output', '-o', type=click.Path(), default=None, help='Archivo de salida')
@click.pass_obj
def from_template(settings, template, name, templates_dir, floors, output):
    """Crea un levantamiento nuevo a partir de una plantilla de edificio"""
    manager = SurveyTemplateManager(templates_dir or settings.templates_dir)
    if template not in manager.list_templates():
        raise click.ClickException(
            f"Template '{template}' not found. Available: {', '.join(manager.list_templates()) or 'none'}"
        )

    overrides = {"floors": floors} if floors else None
    try:
        building = manager.create_building_from_template(template, name, overrides)
    except (KeyError, ValidationError) as e:
        raise click.ClickException(f"Invalid template {template}: {e}")

    output_file = Path(output or f"survey_{template}.yaml")
    write_survey_document(buildings_to_document([building]), output_file)
    stats = building.get_building_stats()
    click.echo(f"Building '{name}' with {stats['total_floors']} floor(s) written to {output_file}")


if __name__ == '__main__':
    cli()
