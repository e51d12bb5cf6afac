"""CLI entry point for image hashing."""

from __future__ import annotations

import click

from image_hash.cli.commands import compare, find_similar, hash_images


@click.group()
def cli() -> None:
    """Perceptual image hashing and near-duplicate search."""


cli.add_command(hash_images)
cli.add_command(compare)
cli.add_command(find_similar)
