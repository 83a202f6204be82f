"""Make ``src`` and ``scripts`` importable and provide upstream payload builders."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for path in (ROOT, ROOT / "scripts", SRC):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


def make_grafana_response(columns: dict[str, list]) -> dict:
    """Build a Grafana ``/api/ds/query`` payload with one frame under refId ``A``."""
    return {
        "results": {
            "A": {
                "status": 200,
                "frames": [
                    {
                        "schema": {"refId": "A", "fields": [{"name": name} for name in columns]},
                        "data": {"values": [list(values) for values in columns.values()]},
                    }
                ],
            }
        }
    }


@pytest.fixture
def grafana_response():
    return make_grafana_response


@pytest.fixture
def owid_metadata() -> dict:
    return {
        "id": 1077602,
        "name": "Carbon intensity of electricity generation",
        "unit": "grams of CO2 equivalents per kilowatt-hour",
        "shortUnit": "gCO2e/kWh",
        "descriptionShort": "Greenhouse gas emissions per unit of electricity generated.",
        "presentation": {"attributionShort": "Ember"},
        "dimensions": {
            "entities": {
                "values": [
                    {"id": 1, "name": "United States", "code": "USA"},
                    {"id": 2, "name": "Germany", "code": "DEU"},
                    {"id": 3, "name": "France", "code": "FRA"},
                    {"id": 4, "name": "Europe", "code": None},
                    {"id": 5, "name": "World", "code": "OWID_WRL"},
                ]
            }
        },
    }


@pytest.fixture
def owid_data() -> dict:
    return {
        "entities": [1, 1, 2, 2, 3, 4, 5],
        "years": [2021, 2023, 2023, 2022, 2023, 2023, 2023],
        "values": [390.0, 369.5, 381.0, 400.0, 56.0, 280.0, 480.0],
    }
