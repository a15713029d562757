"""
Controlador Lista-Formulário

Um único controlador parametrizado por um 'Descritor', instanciado uma vez por
tipo de recurso (turmas, atividades). Máquina de estados:

    IDLE -> CREATING / EDITING -> SUBMITTING -> IDLE
    IDLE -> CONFIRMING -> IDLE

Toda mensagem ao usuário sai por 'notificar(mensagem, categoria)' e toda
mutação bem-sucedida chama 'ao_mudar()' para o painel recontar os totais.
"""

import enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from educador.core.erros import ValidacaoError
from educador.core.logger import get_logger
from educador.core.store import ResourceStore

logger = get_logger(__name__)

Notificador = Callable[[str, str], None]


class Estado(enum.Enum):
    IDLE = 'idle'
    CREATING = 'creating'
    EDITING = 'editing'
    CONFIRMING = 'confirming'
    SUBMITTING = 'submitting'


@dataclass(frozen=True)
class Referencia:
    """Registro pai: coluna local, coleção do pai e campo exibido."""
    coluna: str
    colecao: str
    exibir: str
    mensagem: str


@dataclass(frozen=True)
class Descritor:
    colecao: str
    # campo -> valor padrão do formulário (texto vazio para campos de texto)
    campos: Dict[str, str]
    obrigatorios: Dict[str, str]
    dono: str
    nome: str
    plural: str
    artigo: str = 'a'
    pai: Optional[Referencia] = None
    ordem: Tuple[str, str] = ('created_at', 'desc')

    def formulario_vazio(self) -> Dict[str, str]:
        return dict(self.campos)


def _nada(*args, **kwargs) -> None:
    return None


class ListFormController:

    def __init__(self, descritor: Descritor, store: ResourceStore, owner_id: str,
                 notificar: Notificador = _nada, ao_mudar: Callable[[], None] = _nada):
        self.descritor = descritor
        self.store = store
        self.owner_id = owner_id
        self.notificar = notificar
        self.ao_mudar = ao_mudar

        self.state = Estado.IDLE
        self.rows: List[dict] = []
        self.parent_options: List[dict] = []
        self.form: Dict[str, str] = descritor.formulario_vazio()
        self.editing_id: Optional[str] = None
        self.confirming: Optional[dict] = None
        self.loading = False

    # === CARGA ===

    def load(self) -> bool:
        """Recarrega a lista. Em caso de falha a lista anterior continua visível."""
        d = self.descritor
        self.loading = True
        try:
            if d.pai:
                self.load_parents()

            embed = (d.pai.coluna, d.pai.colecao, (d.pai.exibir,)) if d.pai else None
            resultado = self.store.query(d.colecao, {d.dono: self.owner_id}, order=d.ordem, embed=embed)
        finally:
            self.loading = False

        if not resultado.ok:
            logger.error(f"Erro ao carregar {d.plural}: {resultado.error.message}")
            self.notificar(f"Não foi possível carregar {d.artigo}s {d.plural}.", 'error')
            return False

        self.rows = resultado.data or []
        return True

    def load_parents(self) -> bool:
        pai = self.descritor.pai
        if pai is None:
            return True

        resultado = self.store.query(pai.colecao, {self.descritor.dono: self.owner_id})
        if not resultado.ok:
            logger.error(f"Erro ao carregar {pai.colecao}: {resultado.error.message}")
            return False

        self.parent_options = [
            {'id': linha['id'], pai.exibir: linha.get(pai.exibir)}
            for linha in resultado.data or []
        ]
        return True

    # === FORMULÁRIO ===

    @property
    def can_create(self) -> bool:
        return self.descritor.pai is None or bool(self.parent_options)

    @property
    def dialog_open(self) -> bool:
        return self.state in (Estado.CREATING, Estado.EDITING, Estado.SUBMITTING)

    def open_create(self) -> bool:
        if not self.can_create:
            return False
        self.form = self.descritor.formulario_vazio()
        self.editing_id = None
        self.state = Estado.CREATING
        return True

    def open_edit(self, row: dict) -> None:
        self.form = {
            campo: ('' if row.get(campo) is None else row.get(campo))
            for campo in self.descritor.campos
        }
        self.editing_id = row['id']
        self.state = Estado.EDITING

    def cancel(self) -> None:
        self.form = self.descritor.formulario_vazio()
        self.editing_id = None
        self.confirming = None
        self.state = Estado.IDLE

    def validate(self) -> List[ValidacaoError]:
        d = self.descritor
        erros = []
        for campo, mensagem in d.obrigatorios.items():
            if not str(self.form.get(campo) or '').strip():
                erros.append(ValidacaoError(mensagem, code=campo))
        if d.pai and not self.form.get(d.pai.coluna):
            erros.append(ValidacaoError(d.pai.mensagem, code=d.pai.coluna))
        return erros

    def _payload(self) -> dict:
        dados = {
            campo: (None if valor == '' else valor)
            for campo, valor in self.form.items()
            if campo in self.descritor.campos
        }
        dados[self.descritor.dono] = self.owner_id
        return dados

    def submit(self) -> bool:
        if self.state not in (Estado.CREATING, Estado.EDITING):
            # Também barra o reenvio enquanto a requisição anterior não voltou
            logger.warning(f"submit() ignorado no estado {self.state.value}")
            return False

        d = self.descritor
        erros = self.validate()
        if erros:
            for erro in erros:
                self.notificar(erro.message, 'error')
            return False

        anterior = self.state
        editando = anterior is Estado.EDITING
        self.state = Estado.SUBMITTING

        if editando:
            resultado = self.store.update(d.colecao, self.editing_id, self._payload())
        else:
            resultado = self.store.insert(d.colecao, self._payload())

        acao, verbo = ('atualizar', 'atualizad') if editando else ('criar', 'criad')
        if not resultado.ok:
            logger.error(f"Erro ao {acao} {d.nome}: {resultado.error.message}")
            self.notificar(f"Não foi possível {acao} {d.artigo} {d.nome}.", 'error')
            self.state = anterior
            return False

        self.load()
        self.ao_mudar()
        self.notificar(f"{d.nome.capitalize()} {verbo}{d.artigo} com sucesso!", 'success')
        self.cancel()
        return True

    # === EXCLUSÃO ===

    def request_remove(self, row: dict) -> None:
        self.confirming = row
        self.state = Estado.CONFIRMING

    def confirm_remove(self, resposta: bool) -> bool:
        if self.state is not Estado.CONFIRMING or self.confirming is None:
            return False

        linha = self.confirming
        self.confirming = None
        self.state = Estado.IDLE
        if not resposta:
            return False

        d = self.descritor
        resultado = self.store.delete(d.colecao, linha['id'])
        if not resultado.ok:
            logger.error(f"Erro ao excluir {d.nome} {linha['id']}: {resultado.error.message}")
            self.notificar(f"Não foi possível excluir {d.artigo} {d.nome}.", 'error')
            return False

        self.notificar(f"{d.nome.capitalize()} excluíd{d.artigo} com sucesso!", 'success')
        self.load()
        self.ao_mudar()
        return True

    def remove(self, row: dict, confirmar: Callable[[dict], bool]) -> bool:
        """Atalho: pede a confirmação e exclui numa única chamada."""
        self.request_remove(row)
        return self.confirm_remove(bool(confirmar(row)))
