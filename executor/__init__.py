"""
Stable Treasury v1.0 — Executor (As "Mãos")
============================================

Traduz decisões do tesouro em sequências de chamadas externas.
"""

from .executor import Executor
from .plans import ExecutionPlan, ExecutionSettings, PlanBuilder, PlanStep

__all__ = [
    "Executor",
    "ExecutionPlan", "ExecutionSettings", "PlanBuilder", "PlanStep",
]
