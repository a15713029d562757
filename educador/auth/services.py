"""
Camada de Serviço (Service Layer) da Autenticação

O 'SessionProvider' embrulha o serviço de identidade: guarda o usuário atual
na sessão (cookie assinado do Flask), expõe 'user' e 'loading' e avisa todos
os assinantes a cada mudança de sessão.
"""

from typing import Callable, List, MutableMapping, Optional

from educador.core.erros import AuthError, Resultado, falha, sucesso
from educador.core.identidade import IdentityClient, Usuario
from educador.core.logger import get_logger

logger = get_logger(__name__)

CHAVE_SESSAO = 'usuario'

Assinante = Callable[[Optional[Usuario]], None]


class SessionProvider:

    def __init__(self, identidade: IdentityClient, armazenamento: MutableMapping):
        self._identidade = identidade
        self._armazenamento = armazenamento
        self._assinantes: List[Assinante] = []
        self.loading = False

    @property
    def user(self) -> Optional[Usuario]:
        dados = self._armazenamento.get(CHAVE_SESSAO)
        if not dados:
            return None
        return Usuario.da_sessao(dados)

    def subscribe(self, assinante: Assinante) -> Callable[[], None]:
        """
        Registra um assinante chamado com o usuário atual (ou None) a cada
        mudança de sessão. Retorna a função que cancela a assinatura.
        """
        self._assinantes.append(assinante)

        def cancelar() -> None:
            if assinante in self._assinantes:
                self._assinantes.remove(assinante)

        return cancelar

    def _notificar(self) -> None:
        usuario = self.user
        for assinante in list(self._assinantes):
            assinante(usuario)

    def _gravar(self, usuario: Optional[Usuario]) -> None:
        if usuario is None:
            self._armazenamento.pop(CHAVE_SESSAO, None)
        else:
            self._armazenamento[CHAVE_SESSAO] = usuario.para_sessao()
        self._notificar()

    def sign_in(self, email: str, password: str) -> Resultado:
        self.loading = True
        try:
            usuario = self._identidade.sign_in(email, password)
        except AuthError as erro:
            return falha(erro)
        finally:
            self.loading = False

        self._gravar(usuario)
        return sucesso(usuario)

    def sign_up(self, email: str, password: str, full_name: str) -> Resultado:
        self.loading = True
        try:
            usuario = self._identidade.sign_up(email, password, full_name)
        except AuthError as erro:
            return falha(erro)
        finally:
            self.loading = False

        # Com confirmação de e-mail pendente não há sessão ainda
        if usuario.email_verificado:
            self._gravar(usuario)
        return sucesso(usuario)

    def sign_out(self) -> Resultado:
        usuario = self.user
        self._gravar(None)
        if usuario:
            logger.info(f"Logout efetuado: {usuario.email}")
        return sucesso(None)
