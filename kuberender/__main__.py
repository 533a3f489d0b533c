"""Entry point for `python -m kuberender`.

Usage:
    python -m kuberender render 'manifests/*.yaml'
"""

from __future__ import annotations

from kuberender.cli import cli

cli(prog_name="kuberender")
