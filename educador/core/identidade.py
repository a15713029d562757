"""
Integração com o Serviço de Identidade (Google Identity Platform / Firebase Auth)

Cadastro e login por e-mail e senha usando a API REST do Identity Toolkit.
Mensagens de erro do provedor são repassadas como vieram (AuthError).

Assim que o provedor cria a conta, os ganchos registrados em
'on_user_created' são disparados; é assim que o perfil do professor é criado
fora do fluxo do cliente (ver 'gatilhos.py').
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import requests

from .erros import AuthError
from .logger import get_logger

logger = get_logger(__name__)

IDENTITY_BASE_URL = 'https://identitytoolkit.googleapis.com/v1'


@dataclass(frozen=True)
class Usuario:
    id: str
    email: str
    nome: Optional[str] = None
    email_verificado: bool = True

    def para_sessao(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'nome': self.nome,
            'email_verificado': self.email_verificado,
        }

    @classmethod
    def da_sessao(cls, dados: dict) -> 'Usuario':
        return cls(
            id=dados['id'],
            email=dados.get('email', ''),
            nome=dados.get('nome'),
            email_verificado=dados.get('email_verificado', True),
        )


GanchoUsuarioCriado = Callable[[Usuario, dict], None]


class IdentityClient:

    def __init__(self, api_key: Optional[str], timeout: float = 10,
                 base_url: str = IDENTITY_BASE_URL, exigir_confirmacao: bool = False):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url.rstrip('/')
        self.exigir_confirmacao = exigir_confirmacao
        self._ganchos: List[GanchoUsuarioCriado] = []

    def on_user_created(self, gancho: GanchoUsuarioCriado) -> GanchoUsuarioCriado:
        """Registra um gancho chamado com (usuario, metadados) após cada cadastro."""
        self._ganchos.append(gancho)
        return gancho

    def _post(self, endpoint: str, payload: dict) -> dict:
        if not self.api_key:
            logger.critical("FIREBASE_API_KEY não configurada; autenticação indisponível.")
            raise AuthError("Serviço de autenticação não configurado.", code='unavailable')

        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            resposta = requests.post(url, params={'key': self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Falha de rede ao chamar '{endpoint}': {e}", exc_info=True)
            raise AuthError("Não foi possível conectar ao serviço de autenticação.", code='unavailable') from e

        try:
            dados = resposta.json()
        except ValueError:
            dados = {}

        if resposta.status_code != 200:
            mensagem = (dados.get('error') or {}).get('message') or resposta.text or 'Erro de autenticação'
            logger.warning(f"'{endpoint}' recusado ({resposta.status_code}): {mensagem}")
            raise AuthError(mensagem, code=mensagem.split(' ')[0])

        return dados

    def _disparar_ganchos(self, usuario: Usuario, metadados: dict) -> None:
        for gancho in self._ganchos:
            gancho(usuario, metadados)

    def sign_in(self, email: str, password: str) -> Usuario:
        dados = self._post('signInWithPassword', {
            'email': email,
            'password': password,
            'returnSecureToken': True,
        })

        verificado = True
        if self.exigir_confirmacao:
            info = self._post('lookup', {'idToken': dados['idToken']})
            usuarios = info.get('users') or []
            if not usuarios:
                raise AuthError("USER_NOT_FOUND", code='USER_NOT_FOUND')
            verificado = bool(usuarios[0].get('emailVerified'))
            if not verificado:
                raise AuthError("Email not confirmed", code='email_not_confirmed')

        logger.info(f"Login efetuado: {email}")
        return Usuario(
            id=dados['localId'],
            email=dados.get('email', email),
            nome=dados.get('displayName') or None,
            email_verificado=verificado,
        )

    def sign_up(self, email: str, password: str, full_name: str) -> Usuario:
        dados = self._post('signUp', {
            'email': email,
            'password': password,
            'returnSecureToken': True,
        })
        id_token = dados['idToken']

        usuario = Usuario(
            id=dados['localId'],
            email=dados.get('email', email),
            nome=full_name,
            email_verificado=not self.exigir_confirmacao,
        )
        logger.info(f"Novo usuário cadastrado: {email}")
        # A conta já existe: o perfil é criado antes de qualquer chamada complementar
        self._disparar_ganchos(usuario, {'full_name': full_name})

        try:
            self._post('update', {
                'idToken': id_token,
                'displayName': full_name,
                'returnSecureToken': False,
            })
        except AuthError as e:
            logger.warning(f"Nome de exibição não gravado para {email}: {e.message}")

        if self.exigir_confirmacao:
            try:
                self._post('sendOobCode', {'requestType': 'VERIFY_EMAIL', 'idToken': id_token})
            except AuthError as e:
                logger.error(f"E-mail de confirmação não enviado para {email}: {e.message}")

        return usuario
