"""Rich-Click CLI for route_tree."""

from __future__ import annotations

import logging
from pathlib import Path
import sys

import rich_click as click
from rich.logging import RichHandler

click.rich_click.USE_RICH_MARKUP = True


@click.command()
@click.argument("design_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    show_default="None",
    help="YAML configuration file.",
)
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path),
    default=Path("output"),
    show_default=True,
    help="Output directory for generated files.",
)
@click.option("--report/--no-report", default=True, show_default=True, help="Generate and print an ASCII summary report.")
@click.option("--json/--no-json", "write_json_file", default=True, show_default=True, help="Write per-net trees and failures as JSON.")
@click.option("--viz/--no-viz", default=False, show_default=True, help="Generate 2D HTML visualization.")
@click.option("--open-browser", is_flag=True, default=False, show_default="False", help="Auto-open HTML after generation.")
@click.option("--strict", is_flag=True, default=False, show_default="False", help="Exit with status 1 if any net fails.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def reconstruct(
    design_file: Path,
    config_file: Path | None,
    output_dir: Path,
    report: bool,
    write_json_file: bool,
    viz: bool,
    open_browser: bool,
    strict: bool,
    verbose: bool,
) -> None:
    """Reconstruct per-net routing trees from DESIGN_FILE."""
    from route_tree.config import load_config
    from route_tree.design_parser import parse_design
    from route_tree.errors import ParseError
    from route_tree.reconstruct import reconstruct_design

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )

    config = load_config(config_file)
    if config_file is not None:
        click.echo(f"Loaded config: {config_file}")

    click.echo(f"Parsing design: {design_file}")
    try:
        design = parse_design(design_file)
    except ParseError as exc:
        raise click.ClickException(f"{design_file}: {exc}") from exc

    click.echo(f"Reconstructing {len(design.nets)} nets...")
    outcomes = reconstruct_design(design, config)
    output_dir.mkdir(parents=True, exist_ok=True)

    if report:
        from route_tree.reporter import generate_report

        summary_text = generate_report(design, outcomes, config)
        click.echo(summary_text)
        summary_path = output_dir / "route_tree_summary.txt"
        summary_path.write_text(summary_text + "\n")
        click.echo(f"Writing summary report: {summary_path}")

    if write_json_file:
        from route_tree.reporter import write_json

        json_path = output_dir / "route_tree_nets.json"
        click.echo(f"Writing net trees: {json_path}")
        write_json(outcomes, json_path)

    if viz:
        from route_tree.visualize import render_trees

        viz_path = output_dir / "route_tree_visualization.html"
        click.echo(f"Rendering visualization: {viz_path}")
        render_trees(design, outcomes, config, viz_path, open_browser=open_browser)

    failed = sum(1 for o in outcomes if not o.ok)
    click.echo(f"Done! {len(outcomes) - failed} built, {failed} failed.")
    if strict and failed:
        sys.exit(1)


# Keep the public CLI symbol name stable for __main__/entry points.
app = reconstruct
