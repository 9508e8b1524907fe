"""
Scan commands for Foldscan CLI
"""

import asyncio
import json
import logging
from typing import Optional

import click

from ..core.config import Config
from ..core.observability import setup_logfire
from ..services.scan_service import ProductPageScanService
from ..services.screenshot_store import ScreenshotStore


logger = logging.getLogger(__name__)

_STATE_ICONS = {
    'visible_above_fold': '✅',
    'present_below_fold': '⬇️',
    'present': '✅',
    'not_present': '❌',
    'not_visible_above_fold': '❌',
}


@click.command('scan')
@click.argument('url')
@click.option('--diagnostics', is_flag=True, help='Include review classification diagnostics')
@click.option('--scans-dir', default=None, help=f'Screenshot directory (default: {Config.SCANS_DIR})')
@click.option('--base-url', default=None, help='Public base URL for screenshot links (default: BASE_URL env)')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw JSON response')
def scan_command(url: str, diagnostics: bool, scans_dir: Optional[str], base_url: Optional[str], as_json: bool):
    """
    Scan a product page in the locked 390x844 mobile viewport

    Reports review evidence, price visibility, shipping mentions and
    modal/overlay presence, and saves a fold screenshot.

    Examples:
        foldscan scan https://shop.example.com/products/mug
        foldscan scan https://shop.example.com/products/mug --diagnostics --json
        foldscan scan https://shop.example.com/products/mug --base-url http://localhost:3000
    """
    setup_logfire()

    store = ScreenshotStore(scans_dir=scans_dir, base_url=base_url)
    service = ProductPageScanService(store=store)

    try:
        report = asyncio.run(service.scan_url(url, include_diagnostics=diagnostics))

    except Exception as e:
        click.echo(f"\n❌ {e}", err=True)
        click.echo()
        raise click.Abort()

    payload = service.report_to_dict(report)

    if as_json:
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(f"\n{'='*60}")
    click.echo(f"📱 Fold Scan: {report.url}")
    click.echo(f"{'='*60}\n")

    for signal, state in payload['results'].items():
        click.echo(f"   {_STATE_ICONS.get(state, '•')} {signal:<9} {state}")

    click.echo(f"\n   Screenshot: {report.screenshot_url}")
    click.echo(f"   Duration: {report.duration_seconds}s ({report.modal_observations} modal polls)")

    if 'diagnostics' in payload:
        reviews = payload['diagnostics']['reviews']
        click.echo(f"\n📊 Review diagnostics:")
        for key in ('candidates_found', 'filtered_by_media', 'filtered_by_navigation',
                    'filtered_by_content', 'filtered_by_visibility', 'valid_elements'):
            click.echo(f"   {key}: {reviews[key]}")
        click.echo(f"   above_fold: {len(reviews['above_fold'])}")
        click.echo(f"   below_fold: {len(reviews['below_fold'])}")

    click.echo()


@click.command('serve')
@click.option('--host', default='0.0.0.0', help='Bind address (default: 0.0.0.0)')
@click.option('--port', default=Config.PORT, type=int, help=f'Port (default: {Config.PORT})')
def serve_command(host: str, port: int):
    """
    Run the scan API server

    Examples:
        foldscan serve
        foldscan serve --port 8080
    """
    import uvicorn

    click.echo(f"🚀 Foldscan API on http://{host}:{port} (docs at /docs)")
    uvicorn.run("foldscan.api.app:app", host=host, port=port)
