"""
Constantes Globais do Sistema.
Fonte Única da Verdade (Single Source of Truth) para status, coleções e rótulos.
"""

NOME_APP = 'Educador Remoto'

# === COLEÇÕES DO FIRESTORE ===
COLECAO_PERFIS = 'profiles'
COLECAO_TURMAS = 'turmas'
COLECAO_ATIVIDADES = 'atividades'

# === STATUS DAS ATIVIDADES (enum fechado) ===
STATUS_PENDENTE = 'pending'
STATUS_EM_ANDAMENTO = 'in_progress'
STATUS_CONCLUIDA = 'completed'

STATUS_ATIVIDADE = {
    STATUS_PENDENTE: 'Pendente',
    STATUS_EM_ANDAMENTO: 'Em Andamento',
    STATUS_CONCLUIDA: 'Concluída',
}

STATUS_VALIDOS = tuple(STATUS_ATIVIDADE)

# Nome usado pelo gatilho de perfil quando o cadastro não traz 'full_name'
NOME_PERFIL_PADRAO = 'Professor'

# === ABAS DO PAINEL ===
ABAS_PAINEL = {
    'overview': 'Visão Geral',
    'turmas': 'Turmas',
    'atividades': 'Atividades',
}
ABA_PADRAO = 'overview'
