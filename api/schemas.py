from __future__ import annotations

from typing import List

from pydantic import BaseModel


class DashboardFiltersModel(BaseModel):
    task_category: str = "__all__"
    deployment_environment: str = "__all__"
    top_n: int = 6
    scatter_sample: int = 900


class MetaFiltersResponse(BaseModel):
    task_categories: List[str]
    deployment_environments: List[str]
