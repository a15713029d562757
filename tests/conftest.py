"""Fixtures compartilhadas e dublês de teste (driver em memória e identidade falsa)."""

import copy
import itertools
import os
import uuid
from datetime import datetime, timedelta, timezone

import pytest

# O config falha rápido sem SECRET_KEY: definimos antes de importar a app
os.environ.setdefault('SECRET_KEY', 'chave-de-teste')
os.environ.setdefault('FIREBASE_API_KEY', 'teste')

from config import TestConfig  # noqa: E402
from educador import create_app  # noqa: E402
from educador.auth.services import SessionProvider  # noqa: E402
from educador.core.contexto import Contexto  # noqa: E402
from educador.core.erros import AuthError  # noqa: E402
from educador.core.gatilhos import registrar_gatilhos  # noqa: E402
from educador.core.identidade import Usuario  # noqa: E402
from educador.core.store import ResourceStore  # noqa: E402


class MemoryDriver:
    """
    Mesma interface do FirestoreDriver, guardando tudo em dicionários.
    'falhas' mapeia o nome da operação para a exceção que ela deve lançar.
    """

    def __init__(self):
        self.colecoes = {}
        self.falhas = {}
        self._relogio = itertools.count(1)
        self._ordem = {}
        self._inicio = datetime(2025, 8, 18, 12, 0, tzinfo=timezone.utc)

    def _verificar(self, operacao):
        if operacao in self.falhas:
            raise self.falhas[operacao]

    def _colecao(self, nome):
        return self.colecoes.setdefault(nome, {})

    def agora(self):
        return self._inicio + timedelta(microseconds=next(self._relogio))

    def buscar(self, colecao, filtros, ordem=None):
        self._verificar('buscar')
        linhas = [
            copy.deepcopy(linha)
            for linha in self._colecao(colecao).values()
            if all(linha.get(campo) == valor for campo, valor in filtros.items())
        ]
        if ordem:
            campo, direcao = ordem
            linhas.sort(key=lambda l: (l.get(campo), self._ordem[l['id']]), reverse=direcao == 'desc')
        return linhas

    def ler(self, colecao, doc_id):
        self._verificar('ler')
        linha = self._colecao(colecao).get(doc_id)
        return copy.deepcopy(linha) if linha else None

    def inserir(self, colecao, dados, doc_id=None):
        self._verificar('inserir')
        doc_id = doc_id or uuid.uuid4().hex
        self._colecao(colecao)[doc_id] = {**copy.deepcopy(dados), 'id': doc_id}
        self._ordem[doc_id] = len(self._ordem)
        return self.ler(colecao, doc_id)

    def atualizar(self, colecao, doc_id, patch):
        self._verificar('atualizar')
        self._colecao(colecao)[doc_id].update(copy.deepcopy(patch))
        return self.ler(colecao, doc_id)

    def apagar(self, alvos):
        self._verificar('apagar')
        for colecao, doc_id in list(alvos):
            self._colecao(colecao).pop(doc_id, None)

    def contar(self, colecao, filtros):
        self._verificar('contar')
        return len(self.buscar(colecao, filtros))


class IdentidadeFalsa:
    """Serviço de identidade em memória com as mensagens de erro do provedor."""

    def __init__(self, exigir_confirmacao=False):
        self.exigir_confirmacao = exigir_confirmacao
        self.chamadas = []
        self.contas = {}
        self._ganchos = []

    def on_user_created(self, gancho):
        self._ganchos.append(gancho)
        return gancho

    def sign_up(self, email, password, full_name):
        self.chamadas.append(('sign_up', email))
        if email in self.contas:
            raise AuthError("EMAIL_EXISTS", code='EMAIL_EXISTS')
        if len(password) < 6:
            raise AuthError("WEAK_PASSWORD : Password should be at least 6 characters", code='WEAK_PASSWORD')

        usuario = Usuario(
            id=f"uid-{len(self.contas) + 1}",
            email=email,
            nome=full_name,
            email_verificado=not self.exigir_confirmacao,
        )
        self.contas[email] = (password, usuario)
        for gancho in self._ganchos:
            gancho(usuario, {'full_name': full_name})
        return usuario

    def sign_in(self, email, password):
        self.chamadas.append(('sign_in', email))
        conta = self.contas.get(email)
        if conta is None or conta[0] != password:
            raise AuthError("INVALID_LOGIN_CREDENTIALS", code='INVALID_LOGIN_CREDENTIALS')
        return conta[1]


@pytest.fixture
def driver():
    return MemoryDriver()


@pytest.fixture
def store(driver):
    return ResourceStore(driver)


@pytest.fixture
def identidade(store):
    identidade = IdentidadeFalsa()
    registrar_gatilhos(identidade, store)
    return identidade


@pytest.fixture
def contexto(store, identidade):
    return Contexto(store=store, identidade=identidade)


@pytest.fixture
def sessao(identidade):
    return SessionProvider(identidade, {})


@pytest.fixture
def professor(identidade):
    """Professora 'Ana' já cadastrada (o gatilho cria o perfil)."""
    usuario = identidade.sign_up('ana@escola.com', 'segredo123', 'Ana')
    identidade.chamadas.clear()
    return usuario


@pytest.fixture
def app(contexto):
    app = create_app(TestConfig, contexto=contexto)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logado(client, professor):
    """Cliente HTTP com a sessão da professora já aberta."""
    with client.session_transaction() as sessao_http:
        sessao_http['usuario'] = professor.para_sessao()
    return client
