"""
Descritores dos recursos gerenciados pelo painel.
"""

from educador.core.constants import COLECAO_ATIVIDADES, COLECAO_TURMAS, STATUS_PENDENTE

from .controller import Descritor, Referencia

TURMAS = Descritor(
    colecao=COLECAO_TURMAS,
    campos={
        'name': '',
        'description': '',
        'grade_level': '',
        'subject': '',
    },
    obrigatorios={'name': "O nome da turma é obrigatório."},
    dono='teacher_id',
    nome='turma',
    plural='turmas',
)

ATIVIDADES = Descritor(
    colecao=COLECAO_ATIVIDADES,
    campos={
        'title': '',
        'description': '',
        'due_date': '',
        'status': STATUS_PENDENTE,
        'turma_id': '',
    },
    obrigatorios={'title': "O título da atividade é obrigatório."},
    dono='teacher_id',
    nome='atividade',
    plural='atividades',
    pai=Referencia(
        coluna='turma_id',
        colecao=COLECAO_TURMAS,
        exibir='name',
        mensagem="Selecione uma turma.",
    ),
)

DESCRITORES = {
    'turmas': TURMAS,
    'atividades': ATIVIDADES,
}
