"""Pytest fixtures for dashboard tests."""

import csv
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from core.rows import Row

CSV_COLUMNS = [
    "agent_id",
    "model_architecture",
    "deployment_environment",
    "task_category",
    "task_complexity",
    "autonomy_level",
    "success_rate",
    "accuracy_score",
    "execution_time_seconds",
    "cpu_usage_percent",
    "cost_per_task_cents",
    "performance_index",
]


def _row(**overrides) -> Row:
    values = {
        "task_complexity": 5,
        "autonomy_level": 5,
        "success_rate": 0.5,
        "accuracy_score": 0.5,
        "execution_time_seconds": 10.0,
        "cpu_usage_percent": 50.0,
        "cost_per_task_cents": 1.0,
        "performance_index": 0.5,
        "model_architecture": "GPT-4o",
        "deployment_environment": "Cloud",
        "task_category": "Data Analysis",
    }
    values.update(overrides)
    return Row(**values)


@pytest.fixture
def make_row() -> Callable[..., Row]:
    """Factory for rows with sensible defaults."""
    return _row


@pytest.fixture
def sample_records() -> List[Dict[str, str]]:
    """Raw CSV-like records: nine valid, three incomplete."""
    specs = [
        ("GPT-4o", "Cloud", "Data Analysis", 1, 2, 0.91, 0.88, 4.2, 22.0, 0.9, 0.84),
        ("GPT-4o", "Edge", "Data Analysis", 3, 4, 0.82, 0.80, 7.9, 35.5, 1.4, 0.79),
        ("Claude-3.5", "Cloud", "Customer Service", 2, 6, 0.77, 0.83, 5.1, 28.0, 1.1, 0.81),
        ("Claude-3.5", "Hybrid", "Research", 6, 7, 0.64, 0.71, 14.6, 61.2, 2.6, 0.66),
        ("LLaMA-3", "Edge", "Research", 8, 3, 0.41, 0.52, 22.3, 80.1, 0.7, 0.45),
        ("LLaMA-3", "Cloud", "Customer Service", 4, 5, 0.70, 0.69, 9.8, 44.4, 0.5, 0.62),
        ("Mixtral", "Hybrid", "Data Analysis", 9, 9, 0.35, 0.47, 30.5, 88.0, 3.1, 0.40),
        ("Mixtral", "Cloud", "Research", 5, 2, 0.58, 0.64, 12.0, 50.3, 1.9, 0.57),
        ("Gemini", "Edge", "Customer Service", 7, 8, 0.52, 0.60, 18.7, 70.9, 2.2, ""),
    ]
    records = [dict(zip(CSV_COLUMNS, [f"A{i:03d}", *[str(v) for v in spec]])) for i, spec in enumerate(specs)]
    incomplete = [
        dict(records[0], agent_id="X1", task_complexity=""),
        dict(records[1], agent_id="X2", accuracy_score="n/a"),
        dict(records[2], agent_id="X3", cpu_usage_percent="inf"),
    ]
    return records + incomplete


@pytest.fixture
def sample_csv(tmp_path: Path, sample_records: List[Dict[str, str]]) -> Path:
    """Write sample records to a CSV file in a temp directory."""
    path = tmp_path / "agentic_ai_performance_dataset_test.csv"
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(sample_records)
    return path
