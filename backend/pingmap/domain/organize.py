from __future__ import annotations

from typing import Dict, Iterable, List

from .models import HeatmapEntry

ResultSet = Dict[str, List[HeatmapEntry]]


def sort_by_distance(entries: Iterable[HeatmapEntry]) -> List[HeatmapEntry]:
    # sorted() is stable: equal distances keep cluster discovery order.
    return sorted(entries, key=lambda entry: entry.distance)


def group_by_locality(entries: Iterable[HeatmapEntry]) -> ResultSet:
    grouped: ResultSet = {}
    for entry in entries:
        grouped.setdefault(entry.locality, []).append(entry)
    return grouped


def organize(entries: Iterable[HeatmapEntry]) -> ResultSet:
    return group_by_locality(sort_by_distance(entries))


def result_set_payload(result: ResultSet) -> Dict[str, List[dict]]:
    return {locality: [entry.to_dict() for entry in group] for locality, group in result.items()}
