"""Terminal and document output for CLI commands."""

import json

import yaml
from rich.console import Console
from rich.table import Table

from api_model_tool.model.api import API, ApiSummary
from api_model_tool.model.graph import Object, Operation
from api_model_tool.model.resource import Resource

NO_RESULTS = "No results found."


def dump(data: dict, fmt: str = "yaml") -> str:
    """Serialize a schema document as YAML or JSON."""
    if fmt == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def _table(headers: list[str], rows: list[list[str]], console: Console | None = None) -> None:
    console = console or Console()
    if not rows:
        console.print(NO_RESULTS)
        return
    table = Table(show_header=True, header_style="bold")
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def print_apis(apis: list[API], console: Console | None = None) -> None:
    rows = [[api.alias, api.version, api.full_name, api.protocol] for api in apis]
    _table(["Alias", "API Version", "Full Name", "Protocol"], rows, console)


def print_operations(operations: list[Operation], console: Console | None = None) -> None:
    rows = sorted([op.name, op.method, op.request_uri] for op in operations)
    _table(["Name", "HTTP Method", "Request URI"], rows, console)


def print_objects(objects: list[Object], console: Console | None = None) -> None:
    rows = sorted([obj.name, obj.type.value, obj.data_type] for obj in objects)
    _table(["Name", "Object Type", "Data Type"], rows, console)


def print_resources(resources: list[Resource], console: Console | None = None) -> None:
    rows = sorted(
        [r.name, r.singular_name, r.plural_name, ", ".join(sorted(r.required)), str(len(r.properties))]
        for r in resources
    )
    _table(["Name", "Singular", "Plural", "Required", "Properties"], rows, console)


def print_summary(summary: ApiSummary, console: Console | None = None) -> None:
    console = console or Console()
    table = Table(show_header=False, box=None)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Full name:", summary.full_name)
    table.add_row("API version:", summary.api_version)
    table.add_row("Protocol:", summary.protocol)
    table.add_row("Total operations:", str(summary.operations))
    table.add_row("Total objects:", str(summary.objects))
    table.add_row("Total scalars:", str(summary.scalars))
    table.add_row("Total structures:", str(summary.structures))
    table.add_row("Total payloads:", str(summary.payloads))
    table.add_row("Total exceptions:", str(summary.exceptions))
    table.add_row("Total lists:", str(summary.lists))
    console.print(table)
