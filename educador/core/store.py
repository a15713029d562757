"""
Cliente de Recursos (Resource Store Client)

Camada de acesso tipada sobre as coleções remotas. Toda operação:
  - é escopada pela identidade do chamador (linhas de outros donos são
    invisíveis, não apenas negadas);
  - aplica as políticas declaradas em 'politicas.py';
  - devolve um 'Resultado' e nunca lança exceção para quem chama.

Não há cache: cada leitura vai ao banco.
"""

from functools import wraps
from typing import Iterable, List, Optional, Tuple

from google.api_core.exceptions import GoogleAPIError

from .erros import Resultado, StoreError, falha, sucesso
from .logger import get_logger
from .politicas import COLUNAS_DE_SISTEMA, Politica, obter_politica, verificar_restricoes

logger = get_logger(__name__)

MSG_INDISPONIVEL = "Serviço de dados indisponível."


def _fronteira(operacao):
    """Converte exceções do driver/políticas em Resultado com StoreError."""

    @wraps(operacao)
    def executar(self, colecao, *args, **kwargs):
        if self.driver is None:
            logger.critical(f"{operacao.__name__}('{colecao}') sem cliente do Firestore configurado.")
            return falha(StoreError(MSG_INDISPONIVEL, code='unavailable'))
        if self.uid is None:
            return falha(StoreError("Nenhuma sessão autenticada.", code='policy'))
        try:
            return operacao(self, colecao, *args, **kwargs)
        except StoreError as erro:
            logger.warning(f"{operacao.__name__}('{colecao}') recusado: {erro.message}")
            return falha(erro)
        except GoogleAPIError as e:
            logger.error(f"Erro do Firestore em {operacao.__name__}('{colecao}'): {e}", exc_info=True)
            return falha(StoreError(MSG_INDISPONIVEL, code='unavailable'))

    return executar


class ResourceStore:
    """
    Use 'store.como(uid)' para obter um cliente escopado.
    Um store sem uid recusa todas as operações.
    """

    def __init__(self, driver, uid: Optional[str] = None):
        self.driver = driver
        self.uid = uid

    def como(self, uid: Optional[str]) -> 'ResourceStore':
        return ResourceStore(self.driver, uid)

    # === FUNÇÕES AUXILIARES ===

    def _escopo(self, politica: Politica, filtros: Optional[dict]) -> Optional[dict]:
        """
        Mescla os filtros do chamador com o filtro de dono.
        Retorna None se o chamador pediu explicitamente outro dono
        (o resultado é vazio, nunca um erro).
        """
        filtros = dict(filtros or {})
        if filtros.get(politica.dono, self.uid) != self.uid:
            return None
        filtros[politica.dono] = self.uid
        return filtros

    def _visivel(self, politica: Politica, linha: Optional[dict]) -> Optional[dict]:
        if linha is None or linha.get(politica.dono) != self.uid:
            return None
        return linha

    def _verificar_referencias(self, politica: Politica, linha: dict, colunas: Iterable[str]) -> None:
        for coluna in colunas:
            colecao_pai = politica.referencias.get(coluna)
            if colecao_pai is None:
                continue
            pai = self._visivel(obter_politica(colecao_pai), self.driver.ler(colecao_pai, linha[coluna]))
            if pai is None:
                raise StoreError(
                    f"insert or update violates foreign key constraint on '{coluna}'",
                    code='foreign_key',
                )

    def _anexar(self, linhas: List[dict], embed: Tuple[str, str, Iterable[str]]) -> None:
        """Junta campos do registro pai em cada linha (ex.: nome da turma)."""
        coluna, colecao_pai, campos = embed
        politica_pai = obter_politica(colecao_pai)
        pais = {
            pai['id']: pai
            for pai in self.driver.buscar(colecao_pai, {politica_pai.dono: self.uid})
        }
        for linha in linhas:
            pai = pais.get(linha.get(coluna))
            linha[colecao_pai] = {campo: pai.get(campo) for campo in campos} if pai else None

    def _cascata(self, colecao: str, doc_id: str) -> List[Tuple[str, str]]:
        alvos = [(colecao, doc_id)]
        for colecao_filha, coluna in obter_politica(colecao).cascatas:
            for filha in self.driver.buscar(colecao_filha, {coluna: doc_id}):
                alvos.extend(self._cascata(colecao_filha, filha['id']))
        return alvos

    @staticmethod
    def _limpar(dados: dict) -> dict:
        return {k: v for k, v in dados.items() if k not in COLUNAS_DE_SISTEMA}

    # === OPERAÇÕES ===

    @_fronteira
    def query(self, colecao: str, filters: Optional[dict] = None,
              order: Optional[Tuple[str, str]] = None,
              embed: Optional[Tuple[str, str, Iterable[str]]] = None) -> Resultado:
        politica = obter_politica(colecao)
        filtros = self._escopo(politica, filters)
        if filtros is None:
            return sucesso([])

        linhas = self.driver.buscar(colecao, filtros, order)
        if embed:
            self._anexar(linhas, embed)
        return sucesso(linhas)

    @_fronteira
    def get(self, colecao: str, doc_id: str) -> Resultado:
        politica = obter_politica(colecao)
        return sucesso(self._visivel(politica, self.driver.ler(colecao, doc_id)))

    @_fronteira
    def insert(self, colecao: str, row: dict) -> Resultado:
        politica = obter_politica(colecao)
        linha = {**politica.padroes, **self._limpar(row)}
        for coluna, padrao in politica.padroes.items():
            if linha.get(coluna) is None:
                linha[coluna] = padrao

        if linha.get(politica.dono) != self.uid:
            raise StoreError(
                f"new row violates row-level security policy for table '{colecao}'",
                code='policy',
            )

        erro = verificar_restricoes(colecao, politica, linha)
        if erro:
            raise erro
        self._verificar_referencias(politica, linha, politica.referencias)

        doc_id = None
        if politica.chave:
            doc_id = linha[politica.chave]
            if self.driver.ler(colecao, doc_id) is not None:
                raise StoreError(
                    f"duplicate key value violates unique constraint '{colecao}_{politica.chave}_key'",
                    code='unique',
                )

        agora = self.driver.agora()
        linha['created_at'] = agora
        linha['updated_at'] = agora
        criada = self.driver.inserir(colecao, linha, doc_id)
        logger.info(f"Registro criado em '{colecao}': {criada.get('id')}")
        return sucesso(criada)

    @_fronteira
    def update(self, colecao: str, doc_id: str, patch: dict) -> Resultado:
        politica = obter_politica(colecao)
        atual = self._visivel(politica, self.driver.ler(colecao, doc_id))
        if atual is None:
            raise StoreError(f"Registro '{doc_id}' não encontrado em '{colecao}'", code='not_found')

        patch = self._limpar(patch)
        if patch.get(politica.dono, self.uid) != self.uid:
            raise StoreError(
                f"new row violates row-level security policy for table '{colecao}'",
                code='policy',
            )

        linha = {**atual, **patch}
        erro = verificar_restricoes(colecao, politica, linha)
        if erro:
            raise erro
        self._verificar_referencias(politica, linha, [c for c in patch if c in politica.referencias])

        patch['updated_at'] = self.driver.agora()
        atualizada = self.driver.atualizar(colecao, doc_id, patch)
        logger.info(f"Registro atualizado em '{colecao}': {doc_id}")
        return sucesso(atualizada)

    @_fronteira
    def delete(self, colecao: str, doc_id: str) -> Resultado:
        politica = obter_politica(colecao)
        if self._visivel(politica, self.driver.ler(colecao, doc_id)) is None:
            # Linha invisível para este dono: nada a apagar
            logger.debug(f"delete('{colecao}', '{doc_id}') não afetou nenhuma linha.")
            return sucesso(None)

        alvos = self._cascata(colecao, doc_id)
        self.driver.apagar(alvos)
        logger.info(f"Registro excluído de '{colecao}': {doc_id} ({len(alvos) - 1} em cascata)")
        return sucesso(None)

    @_fronteira
    def count(self, colecao: str, filters: Optional[dict] = None) -> Resultado:
        politica = obter_politica(colecao)
        filtros = self._escopo(politica, filters)
        if filtros is None:
            return sucesso(0)
        return sucesso(self.driver.contar(colecao, filtros))
