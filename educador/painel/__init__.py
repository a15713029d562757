"""
Módulo do Painel (Blueprint)

Visão autenticada da aplicação: visão geral com totais e o gerenciamento de
turmas e atividades.
"""

from flask import Blueprint

painel_bp = Blueprint(
    'painel_bp',
    __name__,
    template_folder='templates'
)

# Importa as rotas no final
from . import routes
