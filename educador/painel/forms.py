from datetime import date

from flask_wtf import FlaskForm
from wtforms import DateField, HiddenField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from educador.core.constants import STATUS_ATIVIDADE


class TurmaForm(FlaskForm):
    id = HiddenField()
    name = StringField('Nome da Turma', validators=[
        DataRequired(message="O nome da turma é obrigatório."),
        Length(max=120),
    ])
    description = TextAreaField('Descrição', validators=[Optional()])
    grade_level = StringField('Série/Ano', validators=[Optional(), Length(max=60)])
    subject = StringField('Disciplina', validators=[Optional(), Length(max=60)])

    def definir_opcoes(self, controlador) -> None:
        """Turmas não têm campos de seleção: nada a preencher."""


class AtividadeForm(FlaskForm):
    id = HiddenField()
    title = StringField('Título', validators=[
        DataRequired(message="O título da atividade é obrigatório."),
        Length(max=200),
    ])
    turma_id = SelectField('Turma', validators=[DataRequired(message="Selecione uma turma.")])
    due_date = DateField('Data de Entrega', validators=[Optional()])
    status = SelectField('Status', choices=list(STATUS_ATIVIDADE.items()))
    description = TextAreaField('Descrição', validators=[Optional()])

    def definir_opcoes(self, controlador) -> None:
        """As turmas do select vêm do controlador (carregadas junto com a lista)."""
        self.turma_id.choices = [('', 'Selecione uma turma')] + [
            (opcao['id'], opcao['name']) for opcao in controlador.parent_options
        ]


def dados_do_form(form, campos) -> dict:
    """Converte o formulário WTForms no estado de formulário do controlador."""
    dados = {}
    for campo in campos:
        valor = getattr(form, campo).data
        if isinstance(valor, date):
            valor = valor.isoformat()
        elif isinstance(valor, str):
            valor = valor.strip()
        dados[campo] = '' if valor is None else valor
    return dados


def dados_para_form(estado: dict) -> dict:
    """Caminho inverso: strings vazias viram None e datas ISO viram 'date'."""
    dados = {}
    for campo, valor in estado.items():
        if campo == 'due_date' and valor:
            valor = date.fromisoformat(str(valor)[:10])
        dados[campo] = None if valor == '' else valor
    return dados


def formatar_data(valor) -> str:
    """Data no formato dd/mm/aaaa. Aceita date, datetime ou string ISO."""
    if not valor:
        return ''
    if isinstance(valor, str):
        valor = date.fromisoformat(valor[:10])
    return valor.strftime('%d/%m/%Y')
