"""
Módulo Principal da Aplicação (Application Factory)
"""

from flask import Flask, render_template
from werkzeug.middleware.proxy_fix import ProxyFix  # Necessário atrás do proxy do Cloud Run
from config import Config

from .core.constants import ABAS_PAINEL, NOME_APP, STATUS_ATIVIDADE
from .core.contexto import CHAVE_EXTENSAO, Contexto
from .core.extensions import csrf, limiter
from .core.logger import get_logger

logger = get_logger(__name__)


def criar_contexto(app: Flask) -> Contexto:
    """
    Monta as dependências externas (Firestore + Identity Platform) uma única
    vez por processo.
    """
    from .core import database, gatilhos
    from .core.identidade import IdentityClient
    from .core.store import ResourceStore

    cliente = database.criar_cliente(app.config.get('GOOGLE_CLOUD_PROJECT'))
    driver = database.FirestoreDriver(cliente) if cliente is not None else None

    contexto = Contexto(
        store=ResourceStore(driver),
        identidade=IdentityClient(
            app.config.get('FIREBASE_API_KEY'),
            timeout=app.config['IDENTITY_TIMEOUT'],
            exigir_confirmacao=app.config['EMAIL_CONFIRMATION'],
        ),
    )
    gatilhos.registrar_gatilhos(contexto.identidade, contexto.store)
    return contexto


def create_app(config_class=Config, contexto: Contexto = None):
    """
    Cria e configura uma instância da aplicação Flask.

    'contexto' permite injetar store e identidade prontos (usado nos testes).
    """

    app = Flask(__name__,
                instance_relative_config=True,
                static_folder='static',
                template_folder='templates')

    # Ajusta o Flask para gerar URLs 'https://' atrás do proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # 1. Carrega a configuração
    app.config.from_object(config_class)

    # 2. Extensões
    csrf.init_app(app)
    limiter.init_app(app)

    # 3. Dependências (store + identidade)
    app.extensions[CHAVE_EXTENSAO] = contexto or criar_contexto(app)

    # Injeta rótulos fixos em todos os templates
    @app.context_processor
    def inject_rotulos():
        return dict(
            NOME_APP=NOME_APP,
            STATUS_ATIVIDADE=STATUS_ATIVIDADE,
            ABAS_PAINEL=ABAS_PAINEL,
        )

    from .painel.forms import formatar_data
    app.add_template_filter(formatar_data, 'data_br')

    # 4. Blueprints
    from .auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/')

    from .painel import painel_bp
    app.register_blueprint(painel_bp, url_prefix='/')

    # 5. Health check e páginas de erro
    @app.route("/health")
    def health_check():
        return f"Servidor {NOME_APP} no ar!", 200

    @app.errorhandler(404)
    def pagina_nao_encontrada(erro):
        return render_template('404.html'), 404

    logger.info(f"{NOME_APP} inicializado (debug={app.config.get('DEBUG')})")
    return app
