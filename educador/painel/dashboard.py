"""
Painel (Agregador)

Carrega o perfil do professor a cada mudança de sessão e calcula os três
totais exibidos na visão geral. 'refresh()' é o único ponto de coordenação
entre os controladores: cada mutação bem-sucedida chama este método.
"""

from dataclasses import dataclass
from typing import Optional

from educador.core.constants import (
    ABA_PADRAO,
    ABAS_PAINEL,
    COLECAO_ATIVIDADES,
    COLECAO_PERFIS,
    COLECAO_TURMAS,
    STATUS_PENDENTE,
)
from educador.core.identidade import Usuario
from educador.core.logger import get_logger
from educador.core.store import ResourceStore

logger = get_logger(__name__)


@dataclass
class Estatisticas:
    total_turmas: int = 0
    total_atividades: int = 0
    atividades_pendentes: int = 0


class Painel:

    def __init__(self, store: ResourceStore, sessao):
        self._store_base = store
        self.store = store.como(None)
        self.user: Optional[Usuario] = None
        self.profile: Optional[dict] = None
        self.stats = Estatisticas()
        self.active_tab = ABA_PADRAO

        self._cancelar = sessao.subscribe(self._ao_mudar_sessao)
        self._ao_mudar_sessao(sessao.user)

    def _ao_mudar_sessao(self, usuario: Optional[Usuario]) -> None:
        self.user = usuario
        self.store = self._store_base.como(usuario.id if usuario else None)
        self.profile = None
        self.stats = Estatisticas()
        if usuario:
            self.load_profile()

    def close(self) -> None:
        self._cancelar()

    def load_profile(self) -> Optional[dict]:
        """O perfil pode ainda não existir logo após o cadastro: isso não é erro."""
        if not self.user:
            return None

        resultado = self.store.query(COLECAO_PERFIS, {'user_id': self.user.id})
        if not resultado.ok:
            logger.error(f"Erro ao carregar perfil de {self.user.email}: {resultado.error.message}")
            return None

        linhas = resultado.data or []
        self.profile = linhas[0] if linhas else None
        if self.profile is None:
            logger.info(f"Perfil de {self.user.email} ainda não disponível.")
        return self.profile

    def refresh(self) -> Estatisticas:
        if not self.user:
            self.stats = Estatisticas()
            return self.stats

        consultas = (
            (COLECAO_TURMAS, None),
            (COLECAO_ATIVIDADES, None),
            (COLECAO_ATIVIDADES, {'status': STATUS_PENDENTE}),
        )
        totais = []
        for colecao, filtros in consultas:
            resultado = self.store.count(colecao, filtros)
            if not resultado.ok:
                # Falha nos totais não interrompe o painel: zera tudo e segue
                logger.warning(f"Erro ao carregar estatísticas ({colecao}): {resultado.error.message}")
                self.stats = Estatisticas()
                return self.stats
            totais.append(resultado.data or 0)

        self.stats = Estatisticas(*totais)
        return self.stats

    def select_tab(self, aba: Optional[str]) -> str:
        self.active_tab = aba if aba in ABAS_PAINEL else ABA_PADRAO
        return self.active_tab

    @property
    def display_name(self) -> str:
        if self.profile and self.profile.get('full_name'):
            return self.profile['full_name']
        if self.user:
            return self.user.nome or self.user.email
        return ''
