"""Decode column-oriented Grafana query results into row dictionaries.

Grafana's ``/api/ds/query`` endpoint returns each result set as a *frame*:
a list of field descriptors plus one value array per field. Downstream code
works on rows, so frames are transposed here. A response without a frame is
treated as "no data" and yields no rows.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .constants import GRAFANA_REF_ID

Row = dict[str, Any]


def decode_frame(fields: Sequence[str], values: Sequence[Sequence[Any]]) -> list[Row]:
    """Transpose ``values`` (one array per field) into one dict per row."""
    if len(fields) != len(values):
        raise ValueError(
            f"Columnar frame has {len(fields)} fields but {len(values)} value arrays."
        )
    if not fields:
        return []
    row_count = len(values[0])
    ragged = [name for name, column in zip(fields, values) if len(column) != row_count]
    if ragged:
        raise ValueError(
            f"Columnar frame is not rectangular; expected {row_count} values for {ragged}."
        )
    return [
        {name: column[index] for name, column in zip(fields, values)}
        for index in range(row_count)
    ]


def first_frame(response: Mapping[str, Any] | None, ref_id: str = GRAFANA_REF_ID) -> Mapping | None:
    """Return the first frame of result set ``ref_id`` or ``None`` when absent."""
    if not isinstance(response, Mapping):
        return None
    results = response.get("results")
    if not isinstance(results, Mapping):
        return None
    result = results.get(ref_id)
    if not isinstance(result, Mapping):
        return None
    frames = result.get("frames")
    if not isinstance(frames, Sequence) or isinstance(frames, str) or not frames:
        return None
    frame = frames[0]
    return frame if isinstance(frame, Mapping) else None


def _field_names(frame: Mapping[str, Any]) -> list[str] | None:
    schema = frame.get("schema")
    if not isinstance(schema, Mapping):
        return None
    fields = schema.get("fields")
    if not isinstance(fields, Sequence):
        return None
    names = []
    for field in fields:
        if isinstance(field, Mapping):
            names.append(str(field.get("name")))
        else:
            names.append(str(field))
    return names


def parse_grafana_response(
    response: Mapping[str, Any] | None,
    ref_id: str = GRAFANA_REF_ID,
) -> list[Row]:
    """Decode the first frame of ``response`` into rows.

    Missing results, frames, schema or data all degrade to an empty list.
    Only a frame whose columns disagree in length raises.
    """
    frame = first_frame(response, ref_id)
    if frame is None:
        return []
    names = _field_names(frame)
    data = frame.get("data")
    if names is None or not isinstance(data, Mapping):
        return []
    values = data.get("values")
    if values is None:
        return []
    return decode_frame(names, values)

