# src/costinsights/analytics/root_cause.py
"""
Root-cause correlation - links cost spikes to same-day infrastructure changes
"""

from datetime import date
from typing import Any, Iterable, List, Mapping, Union

import structlog

from costinsights.analytics.spike_detection import extract_spike_date
from costinsights.models.cost_models import ChangeEvent, RootCauseEntry, SpikeEvent, day_window

logger = structlog.get_logger(__name__)

# Case-sensitive on purpose: deletions and reads never count as growth causes
GROWTH_OPERATIONS = ("Write", "Create", "Update")

SpikeLike = Union[SpikeEvent, str]


def is_growth_operation(operation_name: str) -> bool:
    return any(marker in (operation_name or "") for marker in GROWTH_OPERATIONS)


def _as_event(event: Union[ChangeEvent, Mapping[str, Any]]) -> ChangeEvent:
    if isinstance(event, ChangeEvent):
        return event
    return ChangeEvent.model_validate(dict(event))


def summarize_change_events(spike_date: date,
                            events: Iterable[Union[ChangeEvent, Mapping[str, Any]]]) -> List[str]:
    """Cause strings for growth operations inside the spike day's window."""
    window_start, window_end = day_window(spike_date)
    causes = []

    for raw_event in events:
        event = _as_event(raw_event)
        if not is_growth_operation(event.operation_name):
            continue

        timestamp = event.timestamp
        if timestamp is not None and not (window_start <= timestamp < window_end):
            continue

        causes.append(
            f"🚀 **{event.event_timestamp}**: {event.operation_name} on "
            f"{event.resource_type} **{event.resource_name}**"
        )

    return causes


def spike_description(spike: SpikeLike) -> str:
    return spike.description if isinstance(spike, SpikeEvent) else str(spike)


def spike_dates(spikes: Iterable[SpikeLike]) -> List[date]:
    """Distinct parseable spike dates, in first-seen order."""
    dates: List[date] = []
    for spike in spikes:
        spike_date = extract_spike_date(spike_description(spike))
        if spike_date is not None and spike_date not in dates:
            dates.append(spike_date)
    return dates


class RootCauseCorrelator:
    """Builds one RootCauseEntry per spike whose date can be read from its descriptor."""

    def __init__(self):
        self.logger = logger.bind(analytics="root_cause")

    def correlate(self, spikes: Iterable[SpikeLike],
                  events_by_date: Mapping[date, Iterable[Union[ChangeEvent, Mapping[str, Any]]]]
                  ) -> List[RootCauseEntry]:
        entries = []
        skipped = 0

        for spike in spikes:
            description = spike_description(spike)
            spike_date = extract_spike_date(description)
            if spike_date is None:
                skipped += 1
                continue

            entries.append(RootCauseEntry(
                spike_date=spike_date,
                spike_description=description,
                causes=summarize_change_events(spike_date, events_by_date.get(spike_date, [])),
            ))

        if skipped:
            self.logger.warning(f"Skipped {skipped} spikes without a readable date")

        self.logger.info(
            "Root cause correlation completed",
            spikes=len(entries),
            causes=sum(len(entry.causes) for entry in entries)
        )
        return entries
