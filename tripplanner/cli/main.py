import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from tripapi.utils.polyline import decode
from tripapi.utils.sequencing import nearest_neighbor_order, order_with_fixed_endpoints, tour_cost

app = typer.Typer(help="CLI for the trip planner geo API: routes, matrices and POIs")
console = Console()

DEFAULT_API_URL = "http://localhost:8000"


def get_api_url() -> str:
    """API URL, configurable through the TRIPAPI_URL environment variable."""
    return os.environ.get("TRIPAPI_URL", DEFAULT_API_URL).rstrip("/")


def parse_coordinate(value: str) -> List[float]:
    """Parse a "LNG,LAT" argument into a [lng, lat] pair."""
    parts = value.split(",")
    if len(parts) != 2:
        raise typer.BadParameter(f"'{value}' is not in LNG,LAT format")
    try:
        return [float(parts[0]), float(parts[1])]
    except ValueError:
        raise typer.BadParameter(f"'{value}' is not in LNG,LAT format")


def _report_error(e: Exception) -> None:
    if isinstance(e, httpx.HTTPStatusError):
        try:
            body = e.response.json()
            message = body.get("error", e.response.text)
        except ValueError:
            message = e.response.text
        console.print(f"[bold red]HTTP error: {e.response.status_code} - {message}")
    elif isinstance(e, httpx.RequestError):
        console.print(f"[bold red]Request error: {e}")
    else:
        console.print(f"[bold red]Error: {e}")


def _post(path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    response = httpx.post(f"{get_api_url()}{path}", json=payload, timeout=60.0)
    response.raise_for_status()
    return response.json()


def _get(path: str, params: Dict[str, Any]) -> Dict[str, Any]:
    response = httpx.get(f"{get_api_url()}{path}", params=params, timeout=60.0)
    response.raise_for_status()
    return response.json()


def _format_cell(value: Optional[float], scale: float = 1.0, digits: int = 1) -> str:
    if value is None:
        return "-"
    return f"{value / scale:.{digits}f}"


# Negative longitudes look like options to click
@app.command(context_settings={"ignore_unknown_options": True})
def route(
    coords: List[str] = typer.Argument(..., help="Stops as LNG,LAT (first is the origin, last the destination)"),
    profile: str = typer.Option("foot-walking", help="Travel profile (driving-car, cycling-regular, foot-walking, ...)"),
    provider: Optional[str] = typer.Option(None, help="Provider (google, openrouteservice)"),
    output_file: Optional[Path] = typer.Option(None, help="File to save the full response as JSON"),
):
    """
    Calculate a route through the given stops.
    """
    payload: Dict[str, Any] = {
        "coords": [parse_coordinate(c) for c in coords],
        "profile": profile,
    }
    if provider:
        payload["provider"] = provider

    try:
        with console.status("[bold green]Calculating route..."):
            data = _post("/route", payload)
    except (httpx.HTTPError, ValueError) as e:
        _report_error(e)
        raise typer.Exit(code=1)

    console.print(f"\n[bold]Route via [cyan]{data.get('provider')}[/]")
    console.print(f"Distance: [cyan]{data['distance'] / 1000:.2f} km[/]")
    console.print(f"Duration: [cyan]{data['duration'] / 60:.1f} min[/]")
    if data.get("waypoint_order"):
        console.print(f"Stop order: [cyan]{' -> '.join(str(i) for i in data['waypoint_order'])}[/]")

    instructions = data.get("instructions") or []
    if instructions:
        table = Table(show_header=True, header_style="bold green")
        table.add_column("#")
        table.add_column("Instruction")
        table.add_column("Distance (m)")
        table.add_column("Duration (s)")

        for i, step in enumerate(instructions):
            table.add_row(
                str(i + 1),
                step.get("instruction") or "-",
                f"{step['distance']:.0f}",
                f"{step['duration']:.0f}",
            )

        console.print(table)

    if output_file:
        output_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        console.print(f"[green]Response saved to [bold]{output_file}[/]")


@app.command(context_settings={"ignore_unknown_options": True})
def matrix(
    coords: List[str] = typer.Argument(..., help="Locations as LNG,LAT"),
    profile: str = typer.Option("foot-walking", help="Travel profile"),
    metric: List[str] = typer.Option(["duration"], help="Metric to compute (repeatable: duration, distance)"),
    provider: Optional[str] = typer.Option(None, help="Provider (google, openrouteservice)"),
):
    """
    Calculate the duration/distance matrix between locations.
    """
    payload: Dict[str, Any] = {
        "coords": [parse_coordinate(c) for c in coords],
        "profile": profile,
        "metrics": metric,
    }
    if provider:
        payload["provider"] = provider

    try:
        with console.status("[bold green]Calculating matrix..."):
            data = _post("/matrix", payload)
    except (httpx.HTTPError, ValueError) as e:
        _report_error(e)
        raise typer.Exit(code=1)

    grids = [
        ("durations", "Durations (min)", 60.0),
        ("distances", "Distances (km)", 1000.0),
    ]
    for key, title, scale in grids:
        grid = data.get(key)
        if grid is None:
            continue

        table = Table(title=title, show_header=True, header_style="bold green")
        table.add_column("from \\ to")
        for j in range(len(grid)):
            table.add_column(str(j))
        for i, row in enumerate(grid):
            table.add_row(str(i), *[_format_cell(v, scale) for v in row])

        console.print(table)


@app.command()
def pois(
    lat: float = typer.Option(..., help="Latitude of the search center"),
    lon: float = typer.Option(..., help="Longitude of the search center"),
    radius: int = typer.Option(3000, help="Search radius in meters (100-50000)"),
):
    """
    Search OpenStreetMap POIs around a point.
    """
    try:
        with console.status("[bold green]Searching POIs..."):
            data = _get("/pois-overpass", {"lat": lat, "lon": lon, "radius": radius})
    except (httpx.HTTPError, ValueError) as e:
        _report_error(e)
        raise typer.Exit(code=1)

    results = data.get("pois") or []
    if not results:
        console.print("[yellow]No POIs found.")
        return

    table = Table(show_header=True, header_style="bold green")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Kind")
    table.add_column("Lat")
    table.add_column("Lon")

    for poi in results:
        table.add_row(
            poi["name"],
            poi["category"],
            poi["kind"],
            f"{poi['lat']:.5f}",
            f"{poi['lon']:.5f}",
        )

    console.print(table)
    console.print(f"{len(results)} POIs within {radius} m")


@app.command("decode")
def decode_polyline(
    polyline: str = typer.Argument(..., help="Encoded polyline"),
    precision: int = typer.Option(5, help="Coordinate precision (5 for Google, 6 for some other services)"),
):
    """
    Decode an encoded polyline into coordinates (no network access).
    """
    points = decode(polyline, precision=precision)
    if not points:
        console.print("[yellow]No points decoded.")
        return

    table = Table(show_header=True, header_style="bold green")
    table.add_column("#")
    table.add_column("Lat")
    table.add_column("Lng")
    for i, (lat, lng) in enumerate(points):
        table.add_row(str(i), f"{lat:.5f}", f"{lng:.5f}")

    console.print(table)


@app.command()
def order(
    matrix_file: Path = typer.Argument(..., help="JSON file with a square duration matrix (or an object with 'durations')"),
    start: int = typer.Option(0, help="Index of the starting stop"),
    fixed_end: bool = typer.Option(False, help="Keep the last stop as the destination"),
):
    """
    Print the nearest-neighbor visiting order for a duration matrix.
    """
    try:
        raw = json.loads(matrix_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Could not read matrix file: {e}")
        raise typer.Exit(code=1)

    durations = raw.get("durations") if isinstance(raw, dict) else raw
    if not isinstance(durations, list) or any(not isinstance(row, list) for row in durations):
        console.print("[bold red]Matrix file must contain a list of rows")
        raise typer.Exit(code=1)

    try:
        if fixed_end:
            visit_order = order_with_fixed_endpoints(durations)
        else:
            visit_order = nearest_neighbor_order(durations, start=start)
    except ValueError as e:
        console.print(f"[bold red]Error: {e}")
        raise typer.Exit(code=1)

    console.print(f"Order: [cyan]{' -> '.join(str(i) for i in visit_order)}[/]")
    console.print(f"Total cost: [cyan]{tour_cost(durations, visit_order):.1f}[/]")


def main():
    app()


if __name__ == "__main__":
    main()
