"""
Stable Treasury v1.0 — CLI
===========================

Entry point de linha de comando.

Uso:
  python -m orchestrator warmup
  python -m orchestrator warmup --loop --interval 3600
  python -m orchestrator warmup --reset
  python -m orchestrator balance --pool-id 1 --limits 1000 20000 --execute
  python -m orchestrator balance --pool-id 1 --json
  python -m orchestrator status
  python -m orchestrator --config config/default.yaml --log-level DEBUG status
"""

import argparse
import asyncio
import json
import logging
import sys

import pandas as pd
from dotenv import load_dotenv

from connector.mock.client import MockConnector
from core.constants import VERSION
from .lifecycle import build_orchestrator, cfg, load_config, setup_logging

load_dotenv()

logger = logging.getLogger("CLI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"Stable Treasury v{VERSION}")

    parser.add_argument(
        "--config",
        "-c",
        default="config/default.yaml",
        help="Caminho para arquivo de configuração",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Nível de log (sobrescreve logging.level da config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    warmup = sub.add_parser("warmup", help="Lê cotação do oráculo e anexa ao cache")
    warmup.add_argument("--loop", action="store_true", help="Warmup periódico")
    warmup.add_argument("--interval", type=float, default=None, help="Segundos entre leituras")
    warmup.add_argument("--count", type=int, default=None, help="Número de leituras (loop)")
    warmup.add_argument("--reset", action="store_true", help="Descarta o cache antes da leitura")

    balance = sub.add_parser("balance", help="Tentativa de balanceamento do tesouro")
    balance.add_argument("--pool-id", type=int, required=True, help="Pool estável do tesouro")
    balance.add_argument(
        "--limits", type=int, nargs=2, metavar=("MIN", "MAX"), default=None,
        help="Faixa para sorteio do limite da operação",
    )
    balance.add_argument("--execute", action="store_true", help="Executa a decisão")
    balance.add_argument("--json", action="store_true", help="Saída em JSON")

    sub.add_parser("status", help="Mostra o cache de cotações e o estado do connector")
    return parser


async def run_command(args, config: dict) -> int:
    """Executa o subcomando. Retorna o exit code."""
    orchestrator = build_orchestrator(config)

    if args.command == "warmup":
        if args.reset:
            orchestrator.reset_cache()
        if args.loop:
            interval = args.interval
            if interval is None:
                interval = float(cfg(config, "warmup", "interval_seconds", default=3600))
            appended = await orchestrator.run_warmup_loop(interval, iterations=args.count)
            print(f"{appended} amostras anexadas")
        else:
            sample = await orchestrator.warmup()
            print(f"rate={sample.rate} timestamp={sample.timestamp}")
        return 0

    if args.command == "balance":
        attempt = await orchestrator.balance_treasury(
            pool_id=args.pool_id,
            limits=args.limits,
            execute=args.execute,
        )
        report = attempt.report
        if args.json:
            payload = {"pool_id": attempt.pool_id, "action": attempt.action.to_dict()}
            if report is not None:
                payload["report"] = {
                    "success": report.success,
                    "completed": report.completed,
                    "failed_step": report.failed_step,
                    "error": report.error,
                }
            print(json.dumps(payload))
        else:
            print(attempt.action)
            if report is not None:
                status = "✓" if report.success else f"✗ {report.failed_step}"
                print(f"Execução: {status} ({', '.join(report.completed)})")
        return 0 if report is None or report.success else 1

    # status
    view = orchestrator.treasury()
    cache = orchestrator.state.cache
    print(f"Cache: {'pronto' if view['ready'] else 'incompleto'}")
    if cache is not None and len(cache):
        with pd.option_context("display.float_format", "{:.6f}".format):
            print(cache.to_dataframe().to_string(index=False))
    if isinstance(orchestrator.exchange, MockConnector):
        print("Connector (mock):")
        print(json.dumps(orchestrator.exchange.snapshot(), indent=2))
    return 0


def main():
    """Entry point da CLI."""
    args = build_parser().parse_args()

    config = load_config(args.config)
    if args.log_level:
        config.setdefault("logging", {})["level"] = args.log_level
    setup_logging(config)

    try:
        code = asyncio.run(run_command(args, config))
    except KeyboardInterrupt:
        code = 130
    except Exception as e:
        logger.error(f"Erro fatal: {e}", exc_info=True)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
