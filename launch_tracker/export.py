"""
CSV and JSON serialization of shots and aggregate rows
"""
import csv
import io
import json
from typing import Any, Dict, Iterable, List, Sequence, Union

from pydantic import BaseModel, TypeAdapter

from .models import Shot

_SHOT_LIST = TypeAdapter(List[Shot])


def _as_dict(row: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(row, BaseModel):
        return row.model_dump(mode="json", exclude_none=True)
    return {key: value for key, value in row.items() if value is not None}


def to_csv(rows: Iterable[Union[BaseModel, Dict[str, Any]]]) -> str:
    """CSV text whose header is the union of keys, in first-seen order"""
    records = [_as_dict(row) for row in rows]
    if not records:
        return ""
    headers: List[str] = []
    for record in records:
        for key in record:
            if key not in headers:
                headers.append(key)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=headers, restval="")
    writer.writeheader()
    writer.writerows(records)
    return buffer.getvalue()


def shots_to_json(shots: Sequence[Shot]) -> str:
    """JSON array of shots, absent fields left out"""
    return json.dumps([shot.model_dump(mode="json", exclude_none=True) for shot in shots])


def shots_from_json(text: str) -> List[Shot]:
    return _SHOT_LIST.validate_json(text)
