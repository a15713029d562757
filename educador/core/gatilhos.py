"""
Gatilhos do Banco

'criar_perfil_novo_usuario' roda do lado do servidor quando um usuário é
criado no serviço de identidade. O cliente nunca cria perfis: o painel
tolera a ausência temporária do registro.
"""

from .constants import COLECAO_PERFIS, NOME_PERFIL_PADRAO
from .erros import Resultado
from .identidade import Usuario
from .logger import get_logger
from .store import ResourceStore

logger = get_logger(__name__)


def criar_perfil_novo_usuario(store: ResourceStore, usuario: Usuario, metadados: dict) -> Resultado:
    nome = (metadados or {}).get('full_name') or NOME_PERFIL_PADRAO

    resultado = store.como(usuario.id).insert(COLECAO_PERFIS, {
        'user_id': usuario.id,
        'full_name': nome,
        'school_name': None,
    })

    if resultado.ok:
        logger.info(f"Perfil criado para {usuario.email}")
    else:
        logger.error(f"Falha ao criar perfil de {usuario.email}: {resultado.error.message}")
    return resultado


def registrar_gatilhos(identidade, store: ResourceStore) -> None:
    """Liga o gatilho de perfil ao evento de criação de usuário."""

    @identidade.on_user_created
    def _ao_criar_usuario(usuario: Usuario, metadados: dict) -> None:
        criar_perfil_novo_usuario(store, usuario, metadados)
