"""API: camada de borda HTTP do gateway.

NÃO PODE conter: FSM, política de restart, regras de envio.
"""
