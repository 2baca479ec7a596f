"""Core (UI-agnostic) dashboard logic.

This package contains:
- row normalization (raw CSV records -> typed rows)
- aggregation, boxplot statistics, OLS regression and ranking
- data loading and filter normalization
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
