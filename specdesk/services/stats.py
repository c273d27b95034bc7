"""Aggregate statistics over a loaded spec set."""
from __future__ import annotations

import math
from collections import Counter

from specdesk.constants import ACTIVE_STATUSES, COMPLETE_STATUS
from specdesk.models import PriorityCount, Spec, StatsResult, StatusCount


def _round_half_up(value: float, digits: int) -> float:
    # Halves round up, unlike the banker's rounding of round().
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def calculate_stats(specs: list[Spec]) -> StatsResult:
    """Compute histograms and derived metrics from scratch."""
    total_specs = len(specs)

    status_counts: Counter[str] = Counter()
    priority_counts: Counter[str] = Counter()
    unique_tags: set[str] = set()
    total_tag_refs = 0
    specs_with_dependencies = 0

    for spec in specs:
        status_counts[spec.status] += 1
        if spec.priority is not None:
            priority_counts[spec.priority] += 1
        unique_tags.update(spec.tags)
        total_tag_refs += len(spec.tags)
        if spec.dependsOn:
            specs_with_dependencies += 1

    if total_specs:
        completion_rate = status_counts[COMPLETE_STATUS] / total_specs * 100.0
        avg_tags_per_spec = total_tag_refs / total_specs
    else:
        completion_rate = 0.0
        avg_tags_per_spec = 0.0

    # most_common() is ordered by descending count, ties in first-seen order.
    return StatsResult(
        totalProjects=1,
        totalSpecs=total_specs,
        specsByStatus=[StatusCount(status=s, count=c) for s, c in status_counts.most_common()],
        specsByPriority=[PriorityCount(priority=p, count=c) for p, c in priority_counts.most_common()],
        completionRate=_round_half_up(completion_rate, 1),
        activeSpecs=sum(status_counts[status] for status in ACTIVE_STATUSES),
        totalTags=len(unique_tags),
        avgTagsPerSpec=_round_half_up(avg_tags_per_spec, 2),
        specsWithDependencies=specs_with_dependencies,
    )
