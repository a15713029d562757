"""
Rotas do Painel

Cada rota monta o Painel e o controlador do recurso para a requisição e
dispara a transição correspondente da máquina de estados:

  GET  /<recurso>                    -> load() (IDLE)
  GET  /<recurso>/nova               -> open_create() (CREATING)
  GET  /<recurso>/<id>/editar        -> open_edit() (EDITING)
  POST /<recurso>/salvar             -> submit()
  GET  /<recurso>/<id>/excluir       -> request_remove() (CONFIRMING)
  POST /<recurso>/<id>/excluir       -> confirm_remove()
"""

from flask import (
    abort,
    flash,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from . import painel_bp
from .controller import ListFormController
from .dashboard import Painel
from .descritores import DESCRITORES
from .forms import AtividadeForm, TurmaForm, dados_do_form, dados_para_form
from educador.auth.services import CHAVE_SESSAO
from educador.core.contexto import get_contexto
from educador.core.logger import get_logger

logger = get_logger(__name__)

FORMULARIOS = {
    'turmas': TurmaForm,
    'atividades': AtividadeForm,
}

RECURSO = '<any(turmas, atividades):recurso>'
MSG_SEM_TURMAS = "Você precisa criar pelo menos uma turma antes de adicionar atividades."


@painel_bp.before_request
def exigir_sessao():
    if CHAVE_SESSAO not in session:
        return redirect(url_for('auth_bp.login'))


# === FUNÇÕES AUXILIARES ===

def _montar(recurso=None):
    contexto = get_contexto()
    painel = Painel(contexto.store, contexto.sessao(session))
    if recurso is None:
        return painel, None

    uid = painel.user.id
    controlador = ListFormController(
        DESCRITORES[recurso],
        contexto.store.como(uid),
        uid,
        notificar=flash,
        ao_mudar=painel.refresh,
    )
    return painel, controlador


def _form_do_estado(recurso, controlador):
    dados = dados_para_form(controlador.form)
    dados['id'] = controlador.editing_id
    form = FORMULARIOS[recurso](data=dados)
    form.definir_opcoes(controlador)
    return form


def _linha(controlador, doc_id):
    linha = next((l for l in controlador.rows if l['id'] == doc_id), None)
    if linha is None:
        abort(404)
    return linha


def _render(recurso, painel, controlador, form=None):
    painel.select_tab(recurso)
    return render_template(
        f'painel/{recurso}.html',
        painel=painel,
        ctrl=controlador,
        form=form,
    )


# === ROTAS ===

@painel_bp.route('/')
def index():
    """ Visão geral: totais, ações rápidas e dados do perfil. """
    painel, _ = _montar()
    aba = painel.select_tab(request.args.get('aba'))
    if aba != 'overview':
        return redirect(url_for('painel_bp.listar', recurso=aba))

    painel.refresh()
    return render_template('painel/overview.html', painel=painel)


@painel_bp.route(f'/{RECURSO}')
def listar(recurso):
    painel, controlador = _montar(recurso)
    controlador.load()
    return _render(recurso, painel, controlador)


@painel_bp.route(f'/{RECURSO}/nova')
def nova(recurso):
    painel, controlador = _montar(recurso)
    controlador.load()
    if not controlador.open_create():
        flash(MSG_SEM_TURMAS, 'error')
        return redirect(url_for('painel_bp.listar', recurso=recurso))
    return _render(recurso, painel, controlador, _form_do_estado(recurso, controlador))


@painel_bp.route(f'/{RECURSO}/<doc_id>/editar')
def editar(recurso, doc_id):
    painel, controlador = _montar(recurso)
    controlador.load()
    controlador.open_edit(_linha(controlador, doc_id))
    return _render(recurso, painel, controlador, _form_do_estado(recurso, controlador))


@painel_bp.route(f'/{RECURSO}/salvar', methods=['POST'])
def salvar(recurso):
    painel, controlador = _montar(recurso)
    controlador.load_parents()

    form = FORMULARIOS[recurso]()
    form.definir_opcoes(controlador)

    if form.id.data:
        controlador.open_edit({'id': form.id.data})
    elif not controlador.open_create():
        flash(MSG_SEM_TURMAS, 'error')
        return redirect(url_for('painel_bp.listar', recurso=recurso))

    if form.validate_on_submit():
        controlador.form.update(dados_do_form(form, controlador.descritor.campos))
        if controlador.submit():
            return redirect(url_for('painel_bp.listar', recurso=recurso))

    # Falhou: o formulário continua aberto com o que o usuário digitou
    controlador.load()
    return _render(recurso, painel, controlador, form)


@painel_bp.route(f'/{RECURSO}/<doc_id>/excluir', methods=['GET'])
def confirmar_exclusao(recurso, doc_id):
    painel, controlador = _montar(recurso)
    controlador.load()
    controlador.request_remove(_linha(controlador, doc_id))
    return _render(recurso, painel, controlador)


@painel_bp.route(f'/{RECURSO}/<doc_id>/excluir', methods=['POST'])
def excluir(recurso, doc_id):
    painel, controlador = _montar(recurso)
    controlador.load()
    controlador.request_remove(_linha(controlador, doc_id))
    controlador.confirm_remove(request.form.get('confirmar') == 'sim')
    return redirect(url_for('painel_bp.listar', recurso=recurso))
