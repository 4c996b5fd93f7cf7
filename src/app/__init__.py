"""App: coração do gateway (ciclo de vida da conexão, envio e infraestrutura).

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- connection/: manager da conexão, política de restart, fan-out de pareamento
- services/: serviços de aplicação (envio de mensagens)
- infra/: implementações concretas de IO (stores, transport, QR, telefone)
- protocols/: contratos/interfaces
- observability/: correlation_id para logs estruturados

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
