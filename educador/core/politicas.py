"""
Políticas Declarativas do Banco.

Equivalente em Python das regras de segurança por linha: para cada coleção,
qual campo identifica o dono, quais campos são obrigatórios, quais referências
precisam existir, quais valores são aceitos e o que é apagado em cascata.

O 'ResourceStore' aplica estas regras em TODA requisição. O arquivo
'firestore.rules' na raiz replica as mesmas regras para acesso direto.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .constants import (
    COLECAO_ATIVIDADES,
    COLECAO_PERFIS,
    COLECAO_TURMAS,
    STATUS_PENDENTE,
    STATUS_VALIDOS,
)
from .erros import StoreError


@dataclass(frozen=True)
class Politica:
    dono: str
    obrigatorios: Tuple[str, ...] = ()
    # coluna -> coleção referenciada (chave estrangeira)
    referencias: Dict[str, str] = field(default_factory=dict)
    # (coleção filha, coluna que aponta para esta)
    cascatas: Tuple[Tuple[str, str], ...] = ()
    # coluna -> valores aceitos (CHECK)
    restricoes: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    padroes: Dict[str, object] = field(default_factory=dict)
    # Quando definido, o id do documento é o valor desta coluna (UNIQUE)
    chave: Optional[str] = None


POLITICAS: Dict[str, Politica] = {
    COLECAO_PERFIS: Politica(
        dono='user_id',
        obrigatorios=('user_id', 'full_name'),
        chave='user_id',
    ),
    COLECAO_TURMAS: Politica(
        dono='teacher_id',
        obrigatorios=('teacher_id', 'name'),
        cascatas=((COLECAO_ATIVIDADES, 'turma_id'),),
    ),
    COLECAO_ATIVIDADES: Politica(
        dono='teacher_id',
        obrigatorios=('teacher_id', 'turma_id', 'title'),
        referencias={'turma_id': COLECAO_TURMAS},
        restricoes={'status': STATUS_VALIDOS},
        padroes={'status': STATUS_PENDENTE},
    ),
}

# Colunas mantidas pelo próprio banco; nunca aceitas do chamador
COLUNAS_DE_SISTEMA = ('id', 'created_at', 'updated_at')


def obter_politica(colecao: str) -> Politica:
    politica = POLITICAS.get(colecao)
    if politica is None:
        raise StoreError(f"Coleção desconhecida: '{colecao}'", code='not_found')
    return politica


def _vazio(valor) -> bool:
    return valor is None or (isinstance(valor, str) and not valor.strip())


def verificar_restricoes(colecao: str, politica: Politica, linha: dict) -> Optional[StoreError]:
    """
    Confere NOT NULL e CHECK de uma linha completa.
    Retorna o primeiro erro encontrado ou None.
    """
    for coluna in politica.obrigatorios:
        if _vazio(linha.get(coluna)):
            return StoreError(
                f"null value in column '{coluna}' of relation '{colecao}' violates not-null constraint",
                code='not_null',
            )

    for coluna, aceitos in politica.restricoes.items():
        valor = linha.get(coluna)
        if valor is not None and valor not in aceitos:
            return StoreError(
                f"new row for relation '{colecao}' violates check constraint '{colecao}_{coluna}_check'",
                code='check',
            )

    return None
