"""
Main CLI entry point for Foldscan
"""

import logging

import click

from .. import __version__
from .scan import scan_command, serve_command


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """
    Foldscan - Mobile product page fold scanner

    Check what a shopper sees on the first mobile screen: reviews, price,
    shipping mentions, and blocking popups.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


# Register commands
cli.add_command(scan_command)
cli.add_command(serve_command)


if __name__ == '__main__':
    cli()
