#!/usr/bin/env python3
"""
Comparative Analytics Refresh Job

Rebuilds the cross-company analytics payload from every finished run.
Runs whose stored workforce metric is missing or malformed are recomputed
from their report, then every snapshot is re-ranked against the batch
before aggregation.

Input is a JSON list of runs::

    [{"companyId": "...", "runId": "...", "hqCountry": "...", "industry": "...",
      "workforceMetric": {...} | null, "report": {...} | null}, ...]

Usage:
    python -m workforce_exposure.jobs.refresh_analytics --input runs.json --output payload.json

    # Also write the refreshed per-run snapshots
    python -m workforce_exposure.jobs.refresh_analytics --input runs.json \
        --output payload.json --metrics-output metrics.json

Cron setup (daily at 3 AM):
    0 3 * * * cd /path/to/app && python -m workforce_exposure.jobs.refresh_analytics --input ... --output ...
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from workforce_exposure.analytics import build_comparative_analytics
from workforce_exposure.catalog import OccupationCatalog, get_default_catalog, load_catalog
from workforce_exposure.config import Settings, get_settings, setup_logging
from workforce_exposure.enrichment import enrich_report, normalize_legacy_report
from workforce_exposure.exceptions import WorkforceExposureError
from workforce_exposure.impact import attach_percentiles, resolve_workforce_metric
from workforce_exposure.models import ComparativeAnalyticsPayload, ComparativeRun, OrgReport

logger = logging.getLogger(__name__)


def load_report(raw: Any, catalog: OccupationCatalog, context: str) -> Optional[OrgReport]:
    """Normalise, validate and enrich a raw report; None when unusable."""
    if not raw:
        return None
    try:
        report = OrgReport.model_validate(normalize_legacy_report(raw))
    except ValidationError as e:
        logger.warning(f"{context}: report failed validation ({e.error_count()} errors), ignoring it")
        return None
    return enrich_report(report, catalog)


def prepare_runs(
    raw_runs: List[Dict[str, Any]],
    catalog: OccupationCatalog,
    settings: Settings,
    benchmark: bool = True,
) -> List[ComparativeRun]:
    """
    Turn raw run records into ComparativeRun entries with a usable metric.

    Args:
        raw_runs: Run records as read from the input file
        catalog: Occupational catalog
        settings: Application settings
        benchmark: Re-rank every snapshot against the batch
    """
    runs = []
    for index, raw in enumerate(raw_runs):
        company_id = raw.get("companyId") or raw.get("company_id") or f"company-{index}"
        run_id = raw.get("runId") or raw.get("run_id") or f"run-{index}"
        context = f"{company_id}/{run_id}"

        report = load_report(raw.get("report"), catalog, context)
        stored = raw.get("workforceMetric", raw.get("workforce_metric"))
        metric = resolve_workforce_metric(stored, report, catalog, settings, context)

        runs.append(ComparativeRun(
            company_id=company_id,
            run_id=run_id,
            company_slug=raw.get("companySlug") or (report.metadata.company_slug if report else None),
            display_name=raw.get("displayName") or (report.metadata.company_name if report else None),
            hq_country=raw.get("hqCountry") or (report.metadata.hq_country if report else None),
            industry=raw.get("industry") or (report.metadata.industry if report else None),
            workforce_metric=metric,
            report=report,
        ))

    if benchmark:
        with_metric = [run for run in runs if run.workforce_metric is not None]
        ranked = attach_percentiles([run.workforce_metric for run in with_metric])
        for run, snapshot in zip(with_metric, ranked):
            run.workforce_metric = snapshot

    with_signal = sum(1 for run in runs if run.workforce_metric is not None)
    logger.info(f"Prepared {len(runs)} runs, {with_signal} with a workforce metric")
    return runs


def refresh_analytics(
    raw_runs: List[Dict[str, Any]],
    catalog: Optional[OccupationCatalog] = None,
    settings: Optional[Settings] = None,
    benchmark: bool = True,
) -> Tuple[ComparativeAnalyticsPayload, List[ComparativeRun]]:
    """Prepare runs and build the payload. Returns (payload, runs)."""
    settings = settings or get_settings()
    catalog = catalog if catalog is not None else get_default_catalog()
    runs = prepare_runs(raw_runs, catalog, settings, benchmark=benchmark)
    return build_comparative_analytics(runs, catalog=catalog, settings=settings), runs


def _read_runs(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("runs", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of runs")
    return data


def _write_json(path: Optional[str], data: Any) -> None:
    if path is None or path == "-":
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Rebuild comparative workforce exposure analytics")
    parser.add_argument("--input", required=True, help="JSON file with the list of runs")
    parser.add_argument("--output", required=True, help="Payload output file ('-' for stdout)")
    parser.add_argument("--metrics-output", default=None,
                        help="Optional file for the refreshed per-run snapshots")
    parser.add_argument("--catalog", default=None,
                        help="Occupational catalog JSON (default: configured or packaged catalog)")
    parser.add_argument("--skip-benchmark", action="store_true", default=False,
                        help="Do not re-rank snapshots against the batch")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings)

    logger.info("=" * 80)
    logger.info("Starting comparative analytics refresh job")
    logger.info(f"Job started at: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 80)

    try:
        catalog = load_catalog(args.catalog) if args.catalog else get_default_catalog()
        raw_runs = _read_runs(args.input)
        payload, runs = refresh_analytics(raw_runs, catalog, settings, benchmark=not args.skip_benchmark)

        _write_json(args.output, payload.model_dump(by_alias=True))
        if args.metrics_output:
            _write_json(args.metrics_output, [
                {
                    "companyId": run.company_id,
                    "runId": run.run_id,
                    "workforceMetric": run.workforce_metric.model_dump(by_alias=True)
                    if run.workforce_metric else None,
                }
                for run in runs
            ])
    except (WorkforceExposureError, OSError, ValueError) as e:
        logger.error(f"Fatal error during refresh job: {e}", exc_info=True)
        return 1

    logger.info("=" * 80)
    logger.info("Job completed successfully")
    logger.info(f"Runs: {payload.coverage.runs}, companies: {payload.coverage.companies}")
    logger.info(f"Issues recorded: {len(payload.issues)}")
    logger.info("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
