"""
Stable Treasury v1.0 - Treasury Errors
=======================================

Falhas de pré-condição de uma tentativa de balanceamento.
Todas interrompem a tentativa ANTES de qualquer efeito colateral.
"""


class TreasuryError(Exception):
    """Erro base do Treasury."""
    pass


class NotWarmedUp(TreasuryError):
    """Cache de cotações com menos amostras que o necessário. Use `warmup`."""
    pass


class InvalidPoolShape(TreasuryError):
    """Pool não possui exatamente dois tokens."""
    pass


class InvalidRange(TreasuryError):
    """Faixa de limite informada fora do formato [min; max]."""
    pass


class PoolNotConfigured(TreasuryError):
    """Pool solicitado não está na configuração."""
    def __init__(self, pool_id: int):
        self.pool_id = pool_id
        super().__init__(f"Pool {pool_id} não configurado")
