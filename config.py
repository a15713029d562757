"""
Módulo de Configuração (Blindado)

Define a classe de configuração principal. Implementa o padrão 'Fail Fast':
se uma variável crítica estiver faltando, a aplicação nem inicia.
"""

import os
from dotenv import load_dotenv

# Carrega variáveis do arquivo .env
load_dotenv()


def _flag(nome: str, padrao: str = 'False') -> bool:
    return os.environ.get(nome, padrao).lower() in ('true', '1')


class Config:
    """
    Classe de configuração base da aplicação.
    """

    # === SEGURANÇA CRÍTICA (Fail Fast) ===
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise ValueError("ERRO CRÍTICO: 'SECRET_KEY' não encontrada no .env. A aplicação não pode iniciar insegura.")

    # === GOOGLE CLOUD (FIRESTORE) ===
    GOOGLE_CLOUD_PROJECT = os.environ.get('GOOGLE_CLOUD_PROJECT')

    if not GOOGLE_CLOUD_PROJECT:
        print("AVISO: 'GOOGLE_CLOUD_PROJECT' não configurado. O projeto padrão das credenciais será usado.")

    # === IDENTIDADE (Firebase Auth / Identity Platform) ===
    FIREBASE_API_KEY = os.environ.get('FIREBASE_API_KEY')
    IDENTITY_TIMEOUT = float(os.environ.get('IDENTITY_TIMEOUT', '10'))
    # Quando ativo, o cadastro envia e-mail de confirmação e não abre sessão
    EMAIL_CONFIRMATION = _flag('EMAIL_CONFIRMATION')

    if not FIREBASE_API_KEY:
        print("AVISO: 'FIREBASE_API_KEY' ausente. Login e cadastro não funcionarão.")

    # === RATE LIMIT ===
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # === FLASK ===
    DEBUG = _flag('FLASK_DEBUG')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestConfig(Config):
    """Configuração para a suíte de testes: sem CSRF e sem limites de requisição."""
    TESTING = True
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    FIREBASE_API_KEY = 'teste'
    EMAIL_CONFIRMATION = False
