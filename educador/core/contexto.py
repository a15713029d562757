"""
Contexto da Aplicação (Injeção de Dependências)

Construído uma única vez em 'create_app' e guardado em
app.extensions['educador']. Rotas e serviços recebem o store e o cliente de
identidade por aqui, nunca por variáveis globais de módulo.
"""

from dataclasses import dataclass
from typing import MutableMapping

from flask import current_app

from .identidade import IdentityClient
from .store import ResourceStore

CHAVE_EXTENSAO = 'educador'


@dataclass
class Contexto:
    store: ResourceStore
    identidade: IdentityClient

    def sessao(self, armazenamento: MutableMapping):
        """Cria o SessionProvider da requisição sobre a sessão do Flask."""
        from educador.auth.services import SessionProvider
        return SessionProvider(self.identidade, armazenamento)


def get_contexto() -> Contexto:
    return current_app.extensions[CHAVE_EXTENSAO]
