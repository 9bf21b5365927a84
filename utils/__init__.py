"""
Utilitários do Previsor Financeiro: logging, datas, cache e notificações
"""
