"""
Módulo de Logging Centralizado.

Todos os módulos usam 'get_logger(__name__)' em vez de 'print'. Os logs vão
para stdout, que é o que o Cloud Run/Cloud Logging coleta.
"""

import logging
import os
import sys

FORMATO_PADRAO = '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'


def _nivel_configurado() -> int:
    nome = os.environ.get('LOG_LEVEL', 'INFO').upper()
    return getattr(logging, nome, logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """
    Configura e retorna uma instância de logger com formatação padronizada.

    Args:
        name (str): O nome do módulo que está chamando o log (geralmente __name__).

    Returns:
        logging.Logger: Instância configurada do logger.
    """
    logger = logging.getLogger(name)

    # Evita handlers duplicados quando o módulo é importado mais de uma vez
    if not logger.handlers:
        logger.setLevel(_nivel_configurado())

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(FORMATO_PADRAO))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
