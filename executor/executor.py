"""
Stable Treasury v1.0 — Executor
================================

Executa a decisão do tesouro contra os serviços externos.

Flow por decisão:
  1. Monta o plano (PlanBuilder) a partir da Action
  2. Executa os passos em ordem, cada um com a saída do anterior
  3. Primeira falha externa interrompe o plano (sem retry, sem rollback)
  4. Retorna ExecutionReport (a falha NÃO é relançada ao chamador)
"""

import logging
from typing import Optional

from connector.base import BaseExchange, BaseLedger, BaseWrapBridge
from connector.errors import ExternalCallFailure
from core.actions import Action
from core.models import ExecutionReport, PoolConfig
from .plans import ExecutionPlan, ExecutionSettings, PlanBuilder

logger = logging.getLogger("Executor")


class Executor:
    """
    Runner de planos (saga sem compensação).
    """

    def __init__(
        self,
        exchange: BaseExchange,
        bridge: BaseWrapBridge,
        ledger: BaseLedger,
        settings: ExecutionSettings,
    ):
        self.settings = settings
        self.builder = PlanBuilder(exchange, bridge, ledger, settings)

    async def execute(
        self, action: Action, pool: PoolConfig, rate: float
    ) -> Optional[ExecutionReport]:
        """
        Executa a Action no pool indicado.

        Returns:
            ExecutionReport, ou None para DO_NOTHING.
        """
        plan = self.builder.build(action, pool, rate)
        if plan is None:
            return None
        return await self.run(plan)

    async def run(self, plan: ExecutionPlan) -> ExecutionReport:
        """
        Executa os passos em sequência.

        Cada passo só começa após o resultado do anterior. Qualquer falha
        interrompe o restante do plano (sem retry, sem compensação).
        """
        kind = plan.kind.value
        report = ExecutionReport(kind=kind)
        logger.info(f"[{kind}] Executando plano: {' → '.join(plan.step_names)}")

        previous = None
        for index, step in enumerate(plan.steps):
            try:
                previous = await step.call(previous)
            except ExternalCallFailure as e:
                logger.error(f"[{kind}] ✗ {step.name} FAILED: {e}")
                report.failed_step = step.name
                report.error = str(e)
                skipped = plan.step_names[index + 1:]
                if skipped:
                    logger.warning(f"[{kind}] Passos não executados: {skipped}")
                return report

            report.completed.append(step.name)
            logger.info(f"[{kind}] ✓ {step.name} → {previous}")

        report.output = previous
        logger.info(f"[{kind}] ✓ Plano concluído ({len(report.completed)} passos)")
        return report
