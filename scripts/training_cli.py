#!/usr/bin/env python3
"""
Operator Training Matrix CLI - Dual Mode

This script can operate in two modes:
1. Direct mode (default): Reads the spreadsheet locally using services
2. API mode: Makes HTTP requests to the FastAPI backend

Direct mode keeps nothing between invocations: every command loads the file
given with --file, runs, and prints the result.

Usage:
    # Direct mode
    python scripts/training_cli.py load --file training.csv
    python scripts/training_cli.py operator Alice --file training.csv --page 2
    python scripts/training_cli.py part PN-100 --file training.csv

    # API mode (uses FastAPI backend)
    python scripts/training_cli.py --api-url http://localhost:8000 load --file training.csv
    python scripts/training_cli.py --api-url http://localhost:8000 part PN-100
"""

import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import click
from dotenv import load_dotenv
import requests

from backend.models.errors import ConfigurationError, FileReadError
from backend.models.training import LayoutConfig
from services.model_store import ModelStore
from services.training_import_service import TrainingImportService
from services.training_service import TrainingService
from services.view_service import ViewService, DEFAULT_PAGE_SIZE

# Load environment variables
load_dotenv()

# Configure logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
LOG_FILE = os.getenv('LOG_FILE')

handlers = [logging.StreamHandler(sys.stderr)]
if LOG_FILE:
    handlers.append(logging.FileHandler(LOG_FILE))

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=handlers
)

logger = logging.getLogger('training_cli')

# Configuration
DEFAULT_LAYOUT = LayoutConfig()
PAGE_SIZE = int(os.getenv('OPERATOR_PAGE_SIZE', DEFAULT_PAGE_SIZE))
REQUEST_TIMEOUT = 30


@click.group()
@click.option('--api-url', envvar='API_URL', help='FastAPI backend URL (enables API mode)')
@click.option('--header-row', type=int, envvar='HEADER_ROW_INDEX',
              default=DEFAULT_LAYOUT.header_row_index, show_default=True,
              help='Zero-based header row index')
@click.option('--first-data-row', type=int, envvar='FIRST_DATA_ROW_INDEX',
              default=DEFAULT_LAYOUT.first_data_row_index, show_default=True,
              help='Zero-based first data row index')
@click.option('--operator-col-start', type=int, envvar='OPERATOR_COL_START',
              default=DEFAULT_LAYOUT.operator_col_start, show_default=True,
              help='First operator column')
@click.option('--operator-col-end', type=int, envvar='OPERATOR_COL_END',
              default=DEFAULT_LAYOUT.operator_col_end, show_default=True,
              help='Last operator column (inclusive)')
@click.option('--sheet', envvar='SHEET_NAME', help='Worksheet to read from workbooks')
@click.pass_context
def cli(ctx, api_url, header_row, first_data_row, operator_col_start, operator_col_end, sheet):
    """Operator Training Matrix CLI - Dual Mode Support"""
    ctx.ensure_object(dict)
    ctx.obj['api_url'] = api_url.rstrip('/') if api_url else None
    ctx.obj['mode'] = 'api' if api_url else 'direct'
    ctx.obj['layout'] = LayoutConfig(
        header_row_index=header_row,
        first_data_row_index=first_data_row,
        operator_col_start=operator_col_start,
        operator_col_end=operator_col_end
    )
    ctx.obj['sheet'] = sheet


# ============================================================================
# Direct Mode Helpers (Uses Services Directly)
# ============================================================================

def load_direct(ctx, file_path: Optional[str]) -> Tuple[TrainingService, ViewService, Dict[str, Any]]:
    """Load a file into a fresh store. Exits with status 1 if it cannot be loaded."""
    if not file_path:
        click.echo("✗ --file is required in direct mode", err=True)
        sys.exit(1)

    importer = TrainingImportService(layout=ctx.obj['layout'], sheet_name=ctx.obj['sheet'])

    try:
        result = importer.import_file(file_path)
    except (ConfigurationError, FileReadError) as e:
        click.echo(f"✗ Could not load {file_path}: {e.message}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Load failed: {e}", exc_info=True)
        click.echo(f"✗ Could not load {file_path}: {e}", err=True)
        sys.exit(1)

    store = ModelStore()
    service = TrainingService(store)
    service.load_model(result)
    return service, ViewService(store, page_size=PAGE_SIZE), result.stats


# ============================================================================
# API Mode Helpers (Uses FastAPI Backend)
# ============================================================================

def api_request(method: str, url: str, **kwargs) -> requests.Response:
    """Send a request to the backend, exiting on network errors."""
    try:
        return requests.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
    except requests.exceptions.RequestException as e:
        click.echo(f"❌ Network error: {e}", err=True)
        sys.exit(1)


def error_text(response: requests.Response) -> str:
    """Best-effort error message from a failed response."""
    try:
        data = response.json()
    except ValueError:
        return response.text
    if not isinstance(data, dict):
        return response.text

    detail = data.get('detail')
    if isinstance(detail, list):
        # FastAPI request validation errors
        detail = '; '.join(str(item.get('msg', item)) if isinstance(item, dict) else str(item)
                           for item in detail)
    return data.get('message') or data.get('error') or detail or response.text


# ============================================================================
# Output
# ============================================================================

def echo_stats(stats: Dict[str, Any]):
    click.echo("\nStatistics:")
    click.echo(f"  Rows read: {stats.get('rows_read', 0)}")
    click.echo(f"  Data rows: {stats.get('data_rows', 0)}")
    click.echo(f"  Skipped rows: {stats.get('skipped_rows', 0)}")
    click.echo(f"  Parts: {stats.get('parts', 0)}")
    click.echo(f"  Duplicate part rows: {stats.get('duplicate_part_rows', 0)}")
    click.echo(f"  Operators: {stats.get('operators', 0)}")
    click.echo(f"  Training entries: {stats.get('trainings', 0)}")

    duplicates = stats.get('duplicate_operator_headers') or []
    if duplicates:
        click.echo(f"\n⚠️  Duplicate operator headers merged: {', '.join(duplicates)}")


def echo_operator_view(view: Dict[str, Any]):
    click.echo(view['title'])

    if view.get('message'):
        click.echo(view['message'])
        return

    for row in view['rows']:
        flag = '✓' if row['trained'] else ' '
        click.echo(
            f"  {flag} {row['part_number']:<20} {row['common_name']:<25} "
            f"{row['family']:<12} {row['status']:<12} {row['level']}"
        )

    page = view['pagination']
    click.echo(
        f"\nShowing {page['start']}-{page['end']} of {page['total']} "
        f"(page {page['page']} of {page['total_pages']})"
    )


def echo_part_view(view: Dict[str, Any]):
    click.echo(view['header'])
    if not view['found']:
        return

    click.echo(f"Family: {view['family']} | Status: {view['status']}")

    if view.get('message'):
        click.echo(view['message'])
        return

    for row in view['rows']:
        click.echo(f"  {row['operator_name']:<25} {row['level']}")


def echo_operator_list(items):
    if not items:
        click.echo("No operators.")
        return

    for item in items:
        click.echo(f"  {item['name']:<25} {item['trained_count']} trained / {item['training_count']} entries")


def echo_api_result(response: requests.Response):
    """Echo a mutation response; bodies that are not an OperationResult are errors."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if not isinstance(body, dict) or 'success' not in body:
        click.echo(f"❌ Request failed ({response.status_code}): {error_text(response)}", err=True)
        sys.exit(1)

    echo_result(body)


def echo_direct_mode_note(file_path: str):
    click.echo(f"\n⚠️  Not saved: {file_path} is unchanged. Use --api-url to edit the live model.")


def echo_result(result: Dict[str, Any]):
    if result['success']:
        click.echo(f"✓ {result['message']}")
    else:
        click.echo(f"✗ {result['message']}", err=True)
        sys.exit(1)


# ============================================================================
# Commands
# ============================================================================

@cli.command('load')
@click.option('--file', '-f', 'file_path', required=True, type=click.Path(exists=True),
              help='Training spreadsheet (.csv, .xlsx, .xlsm)')
@click.pass_context
def load_cmd(ctx, file_path: str):
    """Load a training spreadsheet and show import statistics."""
    if ctx.obj['mode'] == 'api':
        api_url = ctx.obj['api_url']
        layout = ctx.obj['layout']
        click.echo(f"📤 Uploading {file_path} to {api_url}...")

        with open(file_path, 'rb') as f:
            data = {
                'header_row_index': layout.header_row_index,
                'first_data_row_index': layout.first_data_row_index,
                'operator_col_start': layout.operator_col_start,
                'operator_col_end': layout.operator_col_end,
            }
            if ctx.obj['sheet']:
                data['sheet_name'] = ctx.obj['sheet']

            response = api_request(
                'POST', f"{api_url}/api/import/upload",
                files={'file': (Path(file_path).name, f)},
                data=data
            )

        if response.status_code != 200:
            click.echo(f"❌ Upload failed ({response.status_code}): {error_text(response)}", err=True)
            sys.exit(1)

        body = response.json()
        click.echo(f"✓ {body['message']}")
        echo_stats(body['stats'])
        return

    _, _, stats = load_direct(ctx, file_path)
    click.echo(f"✓ Loaded {file_path}. Parts and operators are ready.")
    echo_stats(stats)


@cli.command('operators')
@click.option('--file', '-f', 'file_path', type=click.Path(exists=True),
              help='Training spreadsheet (direct mode)')
@click.pass_context
def operators_cmd(ctx, file_path: Optional[str]):
    """List operators sorted by name."""
    if ctx.obj['mode'] == 'api':
        response = api_request('GET', f"{ctx.obj['api_url']}/api/operators")
        if response.status_code != 200:
            click.echo(f"❌ {error_text(response)}", err=True)
            sys.exit(1)
        items = response.json()['items']
    else:
        _, views, _ = load_direct(ctx, file_path)
        items = [asdict(item) for item in views.operator_list()]

    echo_operator_list(items)


@cli.command('operator')
@click.argument('name')
@click.option('--file', '-f', 'file_path', type=click.Path(exists=True),
              help='Training spreadsheet (direct mode)')
@click.option('--page', '-p', type=int, default=1, show_default=True, help='Page number')
@click.pass_context
def operator_cmd(ctx, name: str, file_path: Optional[str], page: int):
    """Show the training of one operator."""
    if ctx.obj['mode'] == 'api':
        response = api_request(
            'GET', f"{ctx.obj['api_url']}/api/operators/{quote(name, safe='')}",
            params={'page': page}
        )
        if response.status_code != 200:
            click.echo(error_text(response), err=True)
            sys.exit(1)
        view = response.json()
    else:
        _, views, _ = load_direct(ctx, file_path)
        view = asdict(views.operator_view(name, page=page))
        if not view['found']:
            click.echo(view['message'], err=True)
            sys.exit(1)

    echo_operator_view(view)


@cli.command('part')
@click.argument('part_number')
@click.option('--file', '-f', 'file_path', type=click.Path(exists=True),
              help='Training spreadsheet (direct mode)')
@click.pass_context
def part_cmd(ctx, part_number: str, file_path: Optional[str]):
    """Show who is trained on a part."""
    if ctx.obj['mode'] == 'api':
        response = api_request(
            'GET', f"{ctx.obj['api_url']}/api/parts/{quote(part_number.strip(), safe='/')}"
        )
        if response.status_code != 200:
            click.echo(error_text(response), err=True)
            sys.exit(1)
        view = response.json()
    else:
        _, views, _ = load_direct(ctx, file_path)
        view = asdict(views.part_view(part_number))
        if not view['found']:
            click.echo(view['message'], err=True)
            sys.exit(1)

    echo_part_view(view)


@cli.command('add-operator')
@click.argument('name')
@click.option('--file', '-f', 'file_path', type=click.Path(exists=True),
              help='Training spreadsheet (direct mode)')
@click.pass_context
def add_operator_cmd(ctx, name: str, file_path: Optional[str]):
    """
    Add an operator.

    API mode changes the live model. Direct mode applies the change to the
    model loaded from --file, shows the resulting operator list and does not
    write anything back.
    """
    if ctx.obj['mode'] == 'api':
        response = api_request('POST', f"{ctx.obj['api_url']}/api/operators", json={'name': name})
        echo_api_result(response)
        return

    service, views, _ = load_direct(ctx, file_path)
    result = service.add_operator(name)
    if not result.success:
        echo_result(result.to_dict())

    click.echo(f'✓ Operator "{name.strip()}" accepted. Operators after the change:')
    echo_operator_list([asdict(item) for item in views.operator_list()])
    echo_direct_mode_note(file_path)


@cli.command('set-training')
@click.argument('operator_name')
@click.argument('part_number')
@click.argument('level')
@click.option('--file', '-f', 'file_path', type=click.Path(exists=True),
              help='Training spreadsheet (direct mode)')
@click.option('--create-operator/--no-create-operator', default=False, show_default=True,
              help='Create the operator if it does not exist')
@click.option('--allow-unknown-part', is_flag=True, help='Accept part numbers not in the catalog')
@click.pass_context
def set_training_cmd(ctx, operator_name: str, part_number: str, level: str,
                     file_path: Optional[str], create_operator: bool, allow_unknown_part: bool):
    """Set an operator's training level on a part and show the part afterwards."""
    if ctx.obj['mode'] == 'api':
        api_url = ctx.obj['api_url']
        response = api_request('PUT', f"{api_url}/api/trainings", json={
            'operator_name': operator_name,
            'part_number': part_number,
            'level': level,
            'create_operator_if_missing': create_operator,
            'allow_unknown_part': allow_unknown_part,
        })
        echo_api_result(response)
        return

    service, views, _ = load_direct(ctx, file_path)
    echo_result(service.set_training(
        operator_name, part_number, level,
        create_operator_if_missing=create_operator,
        allow_unknown_part=allow_unknown_part
    ).to_dict())

    view = views.part_view(part_number)
    if view.found:
        click.echo()
        echo_part_view(asdict(view))
    echo_direct_mode_note(file_path)


if __name__ == '__main__':
    cli(obj={})
