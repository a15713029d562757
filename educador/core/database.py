"""
Módulo de Conexão com o Banco de Dados (Core)

Inicializa o cliente do Google Firestore e expõe o 'FirestoreDriver', a camada
mais baixa de acesso: operações primitivas sem nenhuma regra de negócio.
As políticas de dono, cascata e validação ficam no 'ResourceStore'.
"""

from typing import Iterable, List, Optional, Tuple

from google.cloud import firestore

from .logger import get_logger

logger = get_logger(__name__)


def criar_cliente(projeto: Optional[str] = None) -> Optional[firestore.Client]:
    """
    Cria o cliente do Firestore.

    O SDK busca as credenciais na variável 'GOOGLE_APPLICATION_CREDENTIALS'.
    Retorna None se a conexão não puder ser criada; o 'ResourceStore'
    transforma isso em StoreError a cada chamada.
    """
    try:
        cliente = firestore.Client(project=projeto)
        logger.info("Conexão com o Firestore estabelecida com sucesso.")
        return cliente
    except Exception as e:
        logger.critical(f"ERRO AO CONECTAR COM O FIRESTORE: {e}", exc_info=True)
        return None


def _doc_para_dict(doc) -> dict:
    dados = doc.to_dict() or {}
    dados['id'] = doc.id
    return dados


class FirestoreDriver:
    """
    Operações primitivas sobre coleções do Firestore.

    Todas as funções podem lançar 'google.api_core.exceptions.GoogleAPIError';
    quem chama (ResourceStore) converte em StoreError.
    """

    def __init__(self, cliente: firestore.Client):
        self.cliente = cliente

    def agora(self):
        return firestore.SERVER_TIMESTAMP

    def _consulta(self, colecao: str, filtros: dict):
        consulta = self.cliente.collection(colecao)
        for campo, valor in filtros.items():
            consulta = consulta.where(campo, '==', valor)
        return consulta

    def buscar(self, colecao: str, filtros: dict, ordem: Optional[Tuple[str, str]] = None) -> List[dict]:
        consulta = self._consulta(colecao, filtros)
        if ordem:
            campo, direcao = ordem
            sentido = firestore.Query.DESCENDING if direcao == 'desc' else firestore.Query.ASCENDING
            consulta = consulta.order_by(campo, direction=sentido)
        return [_doc_para_dict(doc) for doc in consulta.stream()]

    def ler(self, colecao: str, doc_id: str) -> Optional[dict]:
        doc = self.cliente.collection(colecao).document(doc_id).get()
        if not doc.exists:
            return None
        return _doc_para_dict(doc)

    def inserir(self, colecao: str, dados: dict, doc_id: Optional[str] = None) -> dict:
        colecao_ref = self.cliente.collection(colecao)
        doc_ref = colecao_ref.document(doc_id) if doc_id else colecao_ref.document()
        doc_ref.set(dados)
        # Relê para devolver os timestamps resolvidos pelo servidor
        return _doc_para_dict(doc_ref.get())

    def atualizar(self, colecao: str, doc_id: str, patch: dict) -> dict:
        doc_ref = self.cliente.collection(colecao).document(doc_id)
        doc_ref.update(patch)
        return _doc_para_dict(doc_ref.get())

    def apagar(self, alvos: Iterable[Tuple[str, str]]) -> None:
        """Apaga vários documentos (colecao, id) num único lote atômico."""
        lote = self.cliente.batch()
        for colecao, doc_id in alvos:
            lote.delete(self.cliente.collection(colecao).document(doc_id))
        lote.commit()

    def contar(self, colecao: str, filtros: dict) -> int:
        resultado = self._consulta(colecao, filtros).count(alias='total').get()
        return int(resultado[0][0].value)
