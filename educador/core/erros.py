"""
Taxonomia de Erros e o par Resultado (dados, erro).

As fronteiras externas (identidade e banco) nunca propagam exceções para as
camadas de cima: elas devolvem um 'Resultado' com o erro preenchido.
"""

from typing import Any, NamedTuple, Optional


class EducadorError(Exception):
    """Erro base da aplicação. Nenhum erro do sistema é fatal."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code!r})"


class AuthError(EducadorError):
    """Credenciais inválidas, e-mail duplicado, senha fraca etc. Mostrado ao usuário como veio."""


class StoreError(EducadorError):
    """
    Falha do banco remoto.

    Códigos usados: 'policy', 'not_found', 'foreign_key', 'check',
    'not_null', 'unique', 'unavailable'.
    """


class ValidacaoError(EducadorError):
    """Falha de validação local; nenhuma requisição chega a ser feita."""


class Resultado(NamedTuple):
    data: Any = None
    error: Optional[EducadorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def sucesso(data: Any = None) -> Resultado:
    return Resultado(data=data)


def falha(erro: EducadorError) -> Resultado:
    return Resultado(error=erro)
