"""Service layer modules."""

from .backfill import backfill_window, run_backfill
from .rate_store import RateStore
from .report import (
    ComparisonReport,
    ComparisonRow,
    build_configured_report,
    build_report,
    render_text,
)
from .resolver import RateResolver, get_resolver, init_resolver
