import unittest
from unittest.mock import MagicMock, patch

import requests

from educador.auth.services import SessionProvider
from educador.core.erros import AuthError
from educador.core.gatilhos import registrar_gatilhos
from educador.core.identidade import IdentityClient, Usuario
from educador.core.store import ResourceStore

from conftest import MemoryDriver


def _resposta(status, dados):
    resposta = MagicMock()
    resposta.status_code = status
    resposta.json.return_value = dados
    resposta.text = str(dados)
    return resposta


class TestIdentityClient(unittest.TestCase):

    def setUp(self):
        self.cliente = IdentityClient('chave-api', timeout=5)

    @patch('educador.core.identidade.requests.post')
    def test_sign_in_sucesso(self, mock_post):
        mock_post.return_value = _resposta(200, {
            'localId': 'uid-1', 'email': 'ana@escola.com', 'displayName': 'Ana', 'idToken': 'tok'
        })

        usuario = self.cliente.sign_in('ana@escola.com', 'segredo123')

        self.assertEqual(usuario, Usuario(id='uid-1', email='ana@escola.com', nome='Ana'))
        args, kwargs = mock_post.call_args
        self.assertTrue(args[0].endswith('/accounts:signInWithPassword'))
        self.assertEqual(kwargs['params'], {'key': 'chave-api'})
        self.assertEqual(kwargs['timeout'], 5)

    @patch('educador.core.identidade.requests.post')
    def test_sign_in_repassa_mensagem_do_provedor(self, mock_post):
        mock_post.return_value = _resposta(400, {'error': {'message': 'INVALID_LOGIN_CREDENTIALS'}})

        with self.assertRaises(AuthError) as ctx:
            self.cliente.sign_in('ana@escola.com', 'errada')

        self.assertEqual(ctx.exception.message, 'INVALID_LOGIN_CREDENTIALS')

    @patch('educador.core.identidade.requests.post')
    def test_senha_fraca_mantem_mensagem_completa(self, mock_post):
        mensagem = 'WEAK_PASSWORD : Password should be at least 6 characters'
        mock_post.return_value = _resposta(400, {'error': {'message': mensagem}})

        with self.assertRaises(AuthError) as ctx:
            self.cliente.sign_up('ana@escola.com', '123', 'Ana')

        self.assertEqual(ctx.exception.message, mensagem)
        self.assertEqual(ctx.exception.code, 'WEAK_PASSWORD')

    @patch('educador.core.identidade.requests.post')
    def test_sign_up_grava_nome_e_dispara_ganchos(self, mock_post):
        mock_post.side_effect = [
            _resposta(200, {'localId': 'uid-9', 'email': 'ana@escola.com', 'idToken': 'tok'}),
            _resposta(200, {'localId': 'uid-9', 'displayName': 'Ana'}),
        ]
        gancho = MagicMock()
        self.cliente.on_user_created(gancho)

        usuario = self.cliente.sign_up('ana@escola.com', 'segredo123', 'Ana')

        self.assertEqual(usuario.id, 'uid-9')
        self.assertTrue(usuario.email_verificado)
        atualizacao = mock_post.call_args_list[1]
        self.assertTrue(atualizacao.args[0].endswith('/accounts:update'))
        self.assertEqual(atualizacao.kwargs['json']['displayName'], 'Ana')
        gancho.assert_called_once_with(usuario, {'full_name': 'Ana'})

    @patch('educador.core.identidade.requests.post')
    def test_sign_up_com_confirmacao_envia_email(self, mock_post):
        cliente = IdentityClient('chave-api', exigir_confirmacao=True)
        mock_post.side_effect = [
            _resposta(200, {'localId': 'uid-9', 'email': 'ana@escola.com', 'idToken': 'tok'}),
            _resposta(200, {}),
            _resposta(200, {'email': 'ana@escola.com'}),
        ]

        usuario = cliente.sign_up('ana@escola.com', 'segredo123', 'Ana')

        self.assertFalse(usuario.email_verificado)
        self.assertEqual(mock_post.call_args_list[2].kwargs['json']['requestType'], 'VERIFY_EMAIL')

    @patch('educador.core.identidade.requests.post')
    def test_sign_in_sem_email_confirmado(self, mock_post):
        cliente = IdentityClient('chave-api', exigir_confirmacao=True)
        mock_post.side_effect = [
            _resposta(200, {'localId': 'uid-9', 'email': 'ana@escola.com', 'idToken': 'tok'}),
            _resposta(200, {'users': [{'localId': 'uid-9', 'emailVerified': False}]}),
        ]

        with self.assertRaises(AuthError) as ctx:
            cliente.sign_in('ana@escola.com', 'segredo123')

        self.assertEqual(ctx.exception.message, 'Email not confirmed')

    @patch('educador.core.identidade.requests.post')
    def test_falha_ao_gravar_nome_ainda_cria_perfil(self, mock_post):
        store = ResourceStore(MemoryDriver())
        registrar_gatilhos(self.cliente, store)
        mock_post.side_effect = [
            _resposta(200, {'localId': 'uid-9', 'email': 'ana@escola.com', 'idToken': 'tok'}),
            _resposta(503, {'error': {'message': 'INTERNAL_ERROR'}}),
        ]

        resultado = SessionProvider(self.cliente, {}).sign_up('ana@escola.com', 'segredo123', 'Ana')

        self.assertTrue(resultado.ok)
        perfil = store.como('uid-9').get('profiles', 'uid-9').data
        self.assertIsNotNone(perfil)
        self.assertEqual(perfil['full_name'], 'Ana')

    @patch('educador.core.identidade.requests.post')
    def test_falha_no_email_de_confirmacao_nao_desfaz_cadastro(self, mock_post):
        cliente = IdentityClient('chave-api', exigir_confirmacao=True)
        gancho = MagicMock()
        cliente.on_user_created(gancho)
        mock_post.side_effect = [
            _resposta(200, {'localId': 'uid-9', 'email': 'ana@escola.com', 'idToken': 'tok'}),
            _resposta(200, {}),
            _resposta(500, {'error': {'message': 'INTERNAL_ERROR'}}),
        ]

        usuario = cliente.sign_up('ana@escola.com', 'segredo123', 'Ana')

        self.assertFalse(usuario.email_verificado)
        gancho.assert_called_once_with(usuario, {'full_name': 'Ana'})

    @patch('educador.core.identidade.requests.post')
    def test_lookup_sem_usuarios(self, mock_post):
        cliente = IdentityClient('chave-api', exigir_confirmacao=True)
        mock_post.side_effect = [
            _resposta(200, {'localId': 'uid-9', 'email': 'ana@escola.com', 'idToken': 'tok'}),
            _resposta(200, {'users': []}),
        ]

        resultado = SessionProvider(cliente, {}).sign_in('ana@escola.com', 'segredo123')

        self.assertFalse(resultado.ok)
        self.assertEqual(resultado.error.message, 'USER_NOT_FOUND')

    @patch('educador.core.identidade.requests.post')
    def test_falha_de_rede(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("sem rede")

        with self.assertRaises(AuthError) as ctx:
            self.cliente.sign_in('ana@escola.com', 'segredo123')

        self.assertEqual(ctx.exception.code, 'unavailable')

    @patch('educador.core.identidade.requests.post')
    def test_sem_api_key_nao_chama_o_provedor(self, mock_post):
        cliente = IdentityClient(None)

        with self.assertRaises(AuthError):
            cliente.sign_in('ana@escola.com', 'segredo123')

        mock_post.assert_not_called()


if __name__ == '__main__':
    unittest.main()
