from google.api_core.exceptions import ServiceUnavailable

from educador.auth.services import SessionProvider
from educador.core.identidade import Usuario
from educador.painel.controller import ListFormController
from educador.painel.dashboard import Estatisticas, Painel
from educador.painel.descritores import ATIVIDADES, TURMAS


def test_cadastro_de_ana_gera_perfil(store, identidade):
    sessao = SessionProvider(identidade, {})
    painel = Painel(store, sessao)

    resultado = sessao.sign_up('ana@escola.com', 'segredo123', 'Ana')

    assert resultado.ok
    assert painel.user.email == 'ana@escola.com'
    assert painel.profile['full_name'] == 'Ana'
    assert painel.profile['user_id'] == resultado.data.id
    assert painel.display_name == 'Ana'


def test_perfil_ausente_e_tolerado(store):
    sessao = SessionProvider(None, {'usuario': Usuario('uid-x', 'bia@escola.com', 'Bia').para_sessao()})

    painel = Painel(store, sessao)

    assert painel.profile is None
    assert painel.display_name == 'Bia'


def test_fluxo_turma_atividade_e_pendentes(store, sessao, professor):
    sessao.sign_in('ana@escola.com', 'segredo123')
    painel = Painel(store, sessao)
    escopado = store.como(professor.id)
    turmas = ListFormController(TURMAS, escopado, professor.id, ao_mudar=painel.refresh)
    atividades = ListFormController(ATIVIDADES, escopado, professor.id, ao_mudar=painel.refresh)

    turmas.load()
    turmas.open_create()
    turmas.form['name'] = '5º Ano A'
    assert turmas.submit()
    assert painel.stats == Estatisticas(total_turmas=1, total_atividades=0, atividades_pendentes=0)

    atividades.load()
    assert atividades.open_create()
    atividades.form.update(title='Lista 1', turma_id=turmas.rows[0]['id'])
    assert atividades.submit()
    assert painel.stats.atividades_pendentes == 1

    atividades.open_edit(atividades.rows[0])
    atividades.form['status'] = 'completed'
    assert atividades.submit()
    assert painel.stats.atividades_pendentes == 0
    assert painel.stats.total_atividades == 1


def test_falha_nas_contagens_zera_totais(store, driver, sessao, professor):
    sessao.sign_in('ana@escola.com', 'segredo123')
    store.como(professor.id).insert('turmas', {'teacher_id': professor.id, 'name': 'A'})
    painel = Painel(store, sessao)
    assert painel.refresh().total_turmas == 1

    driver.falhas['contar'] = ServiceUnavailable("fora do ar")

    assert painel.refresh() == Estatisticas()


def test_logout_limpa_o_painel(store, sessao, professor):
    sessao.sign_in('ana@escola.com', 'segredo123')
    painel = Painel(store, sessao)
    painel.refresh()

    sessao.sign_out()

    assert painel.user is None
    assert painel.profile is None
    assert painel.refresh() == Estatisticas()


def test_painel_fechado_nao_recebe_mais_avisos(store, sessao, professor):
    painel = Painel(store, sessao)
    painel.close()

    sessao.sign_in('ana@escola.com', 'segredo123')

    assert painel.user is None


def test_selecao_de_aba(store, sessao):
    painel = Painel(store, sessao)

    assert painel.select_tab('turmas') == 'turmas'
    assert painel.select_tab('alunos') == 'overview'
    assert painel.select_tab(None) == 'overview'
