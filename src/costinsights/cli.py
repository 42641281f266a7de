# src/costinsights/cli.py
"""Cost report CLI."""

import asyncio
import json
import sys
from pathlib import Path
import click
import structlog

from costinsights.analytics.analytics_engine import CostReportEngine
from costinsights.clients.bundle import ReportClients
from costinsights.config.settings import LogLevel, Settings
from costinsights.core.exceptions import CostDataFetchException, CostInsightsException
from costinsights.core.utils import setup_logging

logger = structlog.get_logger(__name__)


def _write_json(payload, output) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    else:
        click.echo(text)


async def run_report(settings: Settings, period=None, question=None, traffic_logs=None) -> dict:
    """Connect the clients, generate one report and release the clients."""
    clients = await ReportClients.connect(settings)
    try:
        engine = CostReportEngine(settings, clients)
        report = await engine.generate_report(period=period, question=question, traffic_logs=traffic_logs)
        return report.model_dump(mode="json")
    finally:
        await clients.close()


@click.group()
def cli():
    """Azure cost insights."""
    pass


@cli.command()
@click.option('--period', '-p', default=None, help='Period phrase, e.g. "last 7 days" or "march 2024"')
@click.option('--question', '-q', default=None, help='Free-form question to extract the period from')
@click.option('--traffic-logs', type=click.Path(exists=True, dir_okay=False), default=None,
              help='JSON file of network watcher traffic logs keyed by watcher name')
@click.option('--output', '-o', default=None, help='Output JSON file path (stdout when omitted)')
@click.option('--env-file', default='.env', help='Environment file to load')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def report(period, question, traffic_logs, output, env_file, debug):
    """
    Build a cost report for a period.

    Configure your .env file with:
        AZURE_SUBSCRIPTION_ID=your-subscription-id
        AZURE_TENANT_ID=your-tenant-id
        AZURE_CLIENT_ID=your-client-id
        AZURE_CLIENT_SECRET=your-client-secret
        CLOUD_BENCHMARK_API_KEY=optional-benchmark-key

    Example:
        costinsights report --question "what did we spend last month?" -o report.json
    """
    settings = Settings.create_from_env(env_file)
    if debug:
        settings.debug = True
        settings.log_level = LogLevel.DEBUG
    setup_logging(log_level=settings.log_level.value, log_format=settings.log_format.value)

    logs = None
    if traffic_logs:
        try:
            logs = json.loads(Path(traffic_logs).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON ({e})", param_hint="'--traffic-logs'")
        if not isinstance(logs, dict):
            raise click.BadParameter("expected a JSON object keyed by watcher name", param_hint="'--traffic-logs'")

    try:
        payload = asyncio.run(run_report(settings, period=period, question=question, traffic_logs=logs))
    except CostDataFetchException as e:
        logger.error("Report generation failed", error=e.message)
        _write_json({"error": "Failed to fetch data", "details": e.message}, output)
        sys.exit(1)
    except CostInsightsException as e:
        logger.error("Report generation failed", error=e.message)
        click.echo(f"❌ {e.message}", err=True)
        sys.exit(1)

    _write_json(payload, output)


if __name__ == '__main__':
    cli()
