from flask_wtf import FlaskForm
from wtforms import EmailField, PasswordField, StringField
from wtforms.validators import DataRequired, Email, EqualTo, Length


class LoginForm(FlaskForm):
    email = EmailField('Email', validators=[
        DataRequired(message="Email é obrigatório"),
        Email(message="Email inválido"),
    ])
    password = PasswordField('Senha', validators=[
        DataRequired(message="Senha é obrigatória"),
    ])


class CadastroForm(FlaskForm):
    full_name = StringField('Nome Completo', validators=[
        DataRequired(message="Nome é obrigatório"),
        Length(max=120, message="Nome deve ter no máximo 120 caracteres"),
    ])
    email = EmailField('Email', validators=[
        DataRequired(message="Email é obrigatório"),
        Email(message="Email inválido"),
    ])
    # O tamanho mínimo é regra do provedor; a mensagem dele chega ao usuário
    password = PasswordField('Senha', validators=[
        DataRequired(message="Senha é obrigatória"),
    ])
    confirm_password = PasswordField('Confirmar Senha', validators=[
        DataRequired(message="Confirme a senha"),
        EqualTo('password', message="As senhas não coincidem"),
    ])
