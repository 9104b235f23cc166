"""Turn raw index and legacy rows into ScoredResult records.

Pure functions: no I/O. Both strategies end here so their results share
one shape.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from omnisearch.application.dtos.search import ScoredResult, ScoreEntry
from omnisearch.core.constants import score_column
from omnisearch.domain.exceptions import (
    MalformedLegacyPayloadException,
    UnknownScorerException,
)
from omnisearch.shared.utils.datetime import parse_datetime

if TYPE_CHECKING:
    from omnisearch.application.interfaces.services import IScorerRegistry

TIMESTAMP_FIELDS = ("created_at", "updated_at", "last_edited_at")


def _decode_legacy_input(row: Mapping[str, Any]) -> dict[str, Any]:
    raw = row.get("legacy_input")
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedLegacyPayloadException(
            row.get("model"), row.get("model_id"), str(e)
        ) from e
    if not isinstance(decoded, dict):
        raise MalformedLegacyPayloadException(
            row.get("model"),
            row.get("model_id"),
            f"expected a JSON object, got {type(decoded).__name__}",
        )
    return decoded


def _parse_timestamps(
    payload: Mapping[str, Any], model: Any, model_id: Any
) -> dict[str, Any]:
    parsed = {}
    for name in TIMESTAMP_FIELDS:
        try:
            parsed[name] = parse_datetime(payload.get(name))
        except (TypeError, ValueError) as e:
            raise MalformedLegacyPayloadException(
                model, model_id, f"invalid {name}: {payload.get(name)!r}"
            ) from e
    return parsed


def score_breakdown(
    row: Mapping[str, Any], registry: IScorerRegistry
) -> tuple[ScoreEntry, ...]:
    """Per-scorer breakdown in registry order; contribution = score * weight."""
    entries = []
    for name in registry.names():
        column = score_column(name)
        if column not in row:
            raise UnknownScorerException(name, f"no {column} column in index row")
        score = float(row[column] or 0)
        weight = registry.weight(name)
        entries.append(
            ScoreEntry(name=name, score=score, weight=weight, contribution=weight * score)
        )
    return tuple(entries)


def rehydrate(row: Mapping[str, Any], registry: IScorerRegistry) -> ScoredResult:
    """Build a ScoredResult from a fulltext index row.

    Decodes legacy_input, overlays total_score and pinned from the row (they
    win over decoded values), attaches the score breakdown, and parses the
    timestamp fields. Missing timestamps stay None.

    Raises:
        MalformedLegacyPayloadException: legacy_input is not a JSON object, or
            a timestamp in it is not ISO-8601.
        UnknownScorerException: a registered scorer has no column in the row.
    """
    model = row["model"]
    model_id = row["model_id"]
    payload = _decode_legacy_input(row)
    total_score = row.get("total_score")
    pinned = bool(row.get("pinned"))
    payload["total_score"] = total_score
    payload["pinned"] = pinned
    return ScoredResult(
        payload=payload,
        model=model,
        model_id=model_id,
        total_score=float(total_score) if total_score is not None else None,
        pinned=pinned,
        scores=score_breakdown(row, registry),
        **_parse_timestamps(payload, model, model_id),
    )


def rehydrate_legacy(row: Mapping[str, Any]) -> ScoredResult:
    """Build a ScoredResult from a hybrid (legacy-rendered) row without rescoring."""
    payload = dict(row)
    model = payload["model"]
    # Index model_id is text; keep keys comparable across strategies.
    model_id = str(payload["id"]) if payload.get("id") is not None else None
    total_score = payload.get("total_score")
    return ScoredResult(
        payload=payload,
        model=model,
        model_id=model_id,
        total_score=float(total_score) if total_score is not None else None,
        pinned=bool(payload.get("pinned")),
        **_parse_timestamps(payload, model, model_id),
    )
