"""Serializers for route optimization outputs."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import Activity
from ...schemas.routing import ActivityModel, OptimizationResponse, SegmentModel
from ..routing.models import OptimizationResult


def activity_from_model(model: ActivityModel) -> Activity:
    return Activity(
        title=model.title,
        latitude=model.latitude,
        longitude=model.longitude,
        id=model.id,
        extra=dict(model.model_extra or {}),
    )


def activities_from_models(models: Sequence[ActivityModel]) -> list[Activity]:
    return [activity_from_model(model) for model in models]


def activity_to_model(activity: Activity) -> ActivityModel:
    return ActivityModel(
        id=activity.id,
        title=activity.title,
        latitude=activity.latitude,
        longitude=activity.longitude,
        **activity.extra,
    )


def result_to_response(result: OptimizationResult) -> OptimizationResponse:
    return OptimizationResponse(
        original_order=[activity_to_model(activity) for activity in result.original_order],
        optimized_order=[activity_to_model(activity) for activity in result.optimized_order],
        original_total_time=result.original_total_time,
        optimized_total_time=result.optimized_total_time,
        time_saved=result.time_saved,
        segments=[
            SegmentModel(
                from_title=segment.from_title,
                to_title=segment.to_title,
                duration_minutes=segment.duration_minutes,
                distance_km=segment.distance_km,
            )
            for segment in result.segments
        ],
        matrix_source=result.matrix_source,
        routed_count=result.routed_count,
    )


def result_to_csv(result: OptimizationResult) -> str:
    """One row per hop of the optimized tour, numbered from 1."""
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "from",
        "to",
        "duration_min",
        "distance_km",
        "optimized_total_min",
        "original_total_min",
        "time_saved_min",
        "matrix_source",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for sequence, segment in enumerate(result.segments, start=1):
        writer.writerow(
            {
                "sequence": sequence,
                "from": segment.from_title,
                "to": segment.to_title,
                "duration_min": segment.duration_minutes,
                "distance_km": segment.distance_km,
                "optimized_total_min": result.optimized_total_time,
                "original_total_min": result.original_total_time,
                "time_saved_min": result.time_saved,
                "matrix_source": result.matrix_source,
            }
        )
    return buffer.getvalue()
