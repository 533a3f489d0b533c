"""Click entry point for the ``kuberender`` command."""

from __future__ import annotations

import asyncio
import sys

import click
import yaml

from kuberender.config import load_config
from kuberender.errors import KubeRenderError
from kuberender.fs import DirFS
from kuberender.models.config import KubeRenderConfig
from kuberender.models.source import Source
from kuberender.observability.logging import setup_logging
from kuberender.pipeline import Filter, Transformer, filters, transformers
from kuberender.renderer import Renderer, RendererOptions


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Overrides KUBERENDER_LOG_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Render Kubernetes manifests from YAML files."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    if log_level:
        config.log.level = log_level
    setup_logging(config.log.level, fmt="console" if sys.stderr.isatty() else "json")
    ctx.obj = config


@cli.command()
@click.argument("patterns", nargs=-1, required=True)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Directory the patterns are resolved against.",
)
@click.option("--annotate/--no-annotate", default=None, help="Stamp source provenance annotations.")
@click.option("--kind", "kinds", multiple=True, help="Keep only documents of this kind (repeatable).")
@click.option("--namespace", "namespaces", multiple=True, help="Keep only documents in this namespace (repeatable).")
@click.option("--set-namespace", default=None, help="Set metadata.namespace on every document.")
@click.pass_obj
def render(
    config: KubeRenderConfig,
    patterns: tuple[str, ...],
    root: str,
    annotate: bool | None,
    kinds: tuple[str, ...],
    namespaces: tuple[str, ...],
    set_namespace: str | None,
) -> None:
    """Render the manifests matching PATTERNS and print them as a YAML stream."""
    if annotate is not None:
        config.render.source_annotations = annotate

    chosen_filters: list[Filter] = []
    if kinds:
        chosen_filters.append(filters.kind(*kinds))
    if namespaces:
        chosen_filters.append(filters.namespace(*namespaces))
    chosen_transformers: list[Transformer] = []
    if set_namespace:
        chosen_transformers.append(transformers.set_namespace(set_namespace))

    fs = DirFS(root)
    try:
        renderer = Renderer(
            [Source(filesystem=fs, path=p) for p in patterns],
            RendererOptions.from_config(config, chosen_filters, chosen_transformers),
        )
        documents = asyncio.run(renderer.render())
    except KubeRenderError as exc:
        click.echo(f"error: {exc}", err=True)
        for note in getattr(exc, "__notes__", []):
            click.echo(f"  {note}", err=True)
        sys.exit(1)

    if documents:
        click.echo(yaml.safe_dump_all(documents, sort_keys=False), nl=False)
