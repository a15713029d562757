"""
Script Utilitário: setup_perfil.py
Recria o perfil de um professor cujo registro não foi gerado no cadastro
(por exemplo, se o gatilho falhou). Não altera perfis existentes.
"""

from educador import create_app
from educador.core.contexto import CHAVE_EXTENSAO
from educador.core.gatilhos import criar_perfil_novo_usuario
from educador.core.identidade import Usuario

# Inicializa a aplicação para carregar configurações e banco de dados
app = create_app()


def recriar_perfil(user_id, nome):
    print(f"--- Recriando perfil do usuário: {user_id} ---")

    with app.app_context():
        store = app.extensions[CHAVE_EXTENSAO].store
        existente = store.como(user_id).get('profiles', user_id)

        if not existente.ok:
            print(f"❌ ERRO: {existente.error.message}")
            return
        if existente.data:
            print(f"ℹ️  O usuário já possui perfil ({existente.data.get('full_name')}). Nada a fazer.")
            return

        usuario = Usuario(id=user_id, email=user_id, nome=nome or None)
        resultado = criar_perfil_novo_usuario(store, usuario, {'full_name': nome})

        if resultado.ok:
            print(f"✅ SUCESSO! Perfil criado para '{resultado.data.get('full_name')}'.")
        else:
            print(f"❌ ERRO: {resultado.error.message}")


if __name__ == "__main__":
    uid_alvo = input("Digite o ID (uid) do usuário: ").strip()
    nome_alvo = input("Nome completo (vazio = 'Professor'): ").strip()
    recriar_perfil(uid_alvo, nome_alvo)
