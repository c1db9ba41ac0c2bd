"""CLI entry point for api-model-tool."""

import platform
from importlib.metadata import version as package_version
from pathlib import Path

import click

from api_model_tool import render
from api_model_tool.config import APP_NAME, DEFAULT_CACHE_PATH, SDK_REPO_URL, configure_logging
from api_model_tool.errors import ApiModelError, ServiceNotFoundError
from api_model_tool.model.api import API
from api_model_tool.model.filters import ObjectFilter, OperationFilter
from api_model_tool.model.graph import ObjectType
from api_model_tool.sdk.helper import SDKHelper, ensure_sdk_repo


def _split(value: str | None) -> list[str]:
    """Split a comma-delimited option value, dropping blanks."""
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def _helper(ctx: click.Context) -> SDKHelper:
    try:
        sdk_path = ensure_sdk_repo(ctx.obj["cache_path"], ctx.obj["repo_url"])
    except ApiModelError as e:
        raise click.ClickException(str(e)) from e
    return SDKHelper(sdk_path)


def _get_api(ctx: click.Context, alias: str) -> API:
    try:
        return _helper(ctx).load_api(alias)
    except ServiceNotFoundError as e:
        raise click.ClickException(f"unknown API {alias}") from e
    except ApiModelError as e:
        raise click.ClickException(str(e)) from e


def _evaluate(func, *args):
    """Run a model query, reporting model errors as CLI errors."""
    try:
        return func(*args)
    except ApiModelError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--cache-path", type=click.Path(path_type=Path), default=DEFAULT_CACHE_PATH, show_default=True, help="Path to cache directory root.")
@click.option("--repo-url", default=SDK_REPO_URL, help="Git URL of the SDK repository holding the API models.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, cache_path: Path, repo_url: str, debug: bool):
    """api-model-tool: transform and inspect service API model definitions."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["cache_path"] = cache_path
    ctx.obj["repo_url"] = repo_url


@main.command("list-apis")
@click.option("-f", "--filter", "aliases", default=None, help="Comma-delimited list of API aliases to show.")
@click.option("--protocol", default=None, help="Comma-delimited list of protocols to show.")
@click.pass_context
def list_apis(ctx: click.Context, aliases: str | None, protocol: str | None):
    """List service APIs in the model cache."""
    helper = _helper(ctx)
    apis = _evaluate(helper.get_apis, _split(aliases), _split(protocol))
    render.print_apis(apis)


@main.command("list-operations")
@click.argument("api_alias")
@click.option("-m", "--method", default=None, help="Comma-delimited list of HTTP methods to filter operations by.")
@click.option("-p", "--prefix", default=None, help="Comma-delimited list of string prefixes to filter operations by.")
@click.pass_context
def list_operations(ctx: click.Context, api_alias: str, method: str | None, prefix: str | None):
    """List operations of a service API."""
    api = _get_api(ctx, api_alias)
    op_filter = OperationFilter(methods=[m.upper() for m in _split(method)], prefixes=_split(prefix))
    render.print_operations(_evaluate(api.get_operations, op_filter))


@main.command("list-objects")
@click.argument("api_alias")
@click.option("-t", "--type", "types", default=None, help="Comma-delimited list of object types to filter objects by.")
@click.option("-p", "--prefix", default=None, help="Comma-delimited list of string prefixes to filter objects by.")
@click.pass_context
def list_objects(ctx: click.Context, api_alias: str, types: str | None, prefix: str | None):
    """List object types (shapes) of a service API."""
    try:
        object_types = [ObjectType(t.lower()) for t in _split(types)]
    except ValueError as e:
        choices = ", ".join(t.value for t in ObjectType)
        raise click.BadParameter(f"{e}; choose from {choices}", param_hint="--type") from e
    api = _get_api(ctx, api_alias)
    obj_filter = ObjectFilter(types=object_types, prefixes=_split(prefix))
    render.print_objects(_evaluate(api.get_objects, obj_filter))


@main.command("list-resources")
@click.argument("api_alias")
@click.pass_context
def list_resources(ctx: click.Context, api_alias: str):
    """List resources inferred from a service API's create operations."""
    api = _get_api(ctx, api_alias)
    resources = _evaluate(api.get_resources)
    render.print_resources(list(resources.values()))


@main.command()
@click.argument("api_alias")
@click.pass_context
def info(ctx: click.Context, api_alias: str):
    """Show summary information about a service API."""
    api = _get_api(ctx, api_alias)
    render.print_summary(_evaluate(api.summary))


@main.command()
@click.argument("api_alias")
@click.argument("resource")
@click.option("-f", "--format", "fmt", default="yaml", type=click.Choice(["yaml", "json"]), help="Output format.")
@click.pass_context
def schema(ctx: click.Context, api_alias: str, resource: str, fmt: str):
    """Show the schema of one resource of a service API."""
    api = _get_api(ctx, api_alias)
    document = _evaluate(api.resource_schema, resource)
    if document is None:
        raise click.ClickException(f"no such resource {resource} in API {api_alias}")
    click.echo(render.dump(document, fmt), nl=False)


@main.command()
@click.argument("api_alias")
@click.option("-f", "--format", "fmt", default="yaml", type=click.Choice(["yaml", "json"]), help="Output format.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the document to this file instead of stdout.")
@click.pass_context
def openapi(ctx: click.Context, api_alias: str, fmt: str, output: Path | None):
    """Render a service API as an OpenAPI3 document."""
    api = _get_api(ctx, api_alias)
    text = render.dump(_evaluate(api.openapi), fmt)
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"OpenAPI document saved to {output}")


@main.command()
def version():
    """Show the version of api-model-tool."""
    click.echo(f"Version: {package_version(APP_NAME)}")
    click.echo(f"Python: {platform.python_version()} {platform.system().lower()}/{platform.machine()}")
