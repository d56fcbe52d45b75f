"""Camada de aplicação: ciclo de vida de sessões e recursos do processo."""
