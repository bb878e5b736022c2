"""
Cronograma para Sprints e Kanban

Este pacote converte o cronograma de um projeto (tabelas markdown com dia, atividade,
duração, entregável e prioridade) em um plano de sprints com story points e quadros
Kanban, gerando relatórios e publicando o plano no GitHub ou no GitProject.
"""

__version__ = "2.0.0"
