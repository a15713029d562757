"""
Rotas do Módulo de Autenticação

Gerencia as rotas para /login, /cadastro e /logout. Esta é a "visão anônima"
da aplicação: quem já tem sessão é mandado direto para o painel.
"""

from flask import (
    flash,
    redirect,
    render_template,
    session,
    url_for,
)

from . import auth_bp
from .forms import CadastroForm, LoginForm
from educador.core.contexto import get_contexto
from educador.core.extensions import limiter
from educador.core.logger import get_logger

logger = get_logger(__name__)


def _sessao():
    return get_contexto().sessao(session)


@auth_bp.route('/login', methods=['GET', 'POST'])
@limiter.limit("10 per minute", methods=['POST'])
def login():
    """ Exibe e processa o formulário de login. """
    sessao = _sessao()
    if sessao.user:
        return redirect(url_for('painel_bp.index'))

    form = LoginForm()
    if form.validate_on_submit():
        resultado = sessao.sign_in(form.email.data.strip(), form.password.data)
        if resultado.ok:
            return redirect(url_for('painel_bp.index'))
        flash(resultado.error.message, 'error')

    return render_template('auth/login.html', form=form)


@auth_bp.route('/cadastro', methods=['GET', 'POST'])
@limiter.limit("5 per minute", methods=['POST'])
def cadastro():
    """
    Cadastro de professor. Senhas diferentes são barradas pelo formulário
    e nenhuma chamada ao serviço de identidade é feita.
    """
    sessao = _sessao()
    if sessao.user:
        return redirect(url_for('painel_bp.index'))

    form = CadastroForm()
    if form.validate_on_submit():
        resultado = sessao.sign_up(
            form.email.data.strip(),
            form.password.data,
            form.full_name.data.strip(),
        )
        if not resultado.ok:
            flash(resultado.error.message, 'error')
        elif resultado.data.email_verificado:
            flash("Cadastro realizado!", 'success')
            return redirect(url_for('painel_bp.index'))
        else:
            flash("Cadastro realizado! Verifique seu email para confirmar a conta.", 'success')
            return redirect(url_for('auth_bp.login'))

    return render_template('auth/cadastro.html', form=form)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    resultado = _sessao().sign_out()
    if resultado.ok:
        flash("Você foi desconectado com sucesso.", 'success')
    else:
        flash("Não foi possível fazer o logout.", 'error')
    return redirect(url_for('auth_bp.login'))
