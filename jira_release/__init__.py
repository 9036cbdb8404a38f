"""Webhook de release do Jira -> Slack.

Este pacote contém:
- constants: variáveis de ambiente e textos fixos
- config: leitura/validação das credenciais (Config imutável)
- errors: ConfigError, ValidationError, UpstreamError
- models: estruturas tipadas das respostas do Jira e do resultado
- jira: cliente REST do Jira (issue, links, metadados de campos)
- fields: localização do campo de ID externo (metadados + heurística)
- enrichment: resolução das issues bloqueadoras
- formatters: montagem da mensagem do Slack (Block Kit)
- services: envio ao webhook do Slack
- pipeline: orquestração e mapeamento de erros
- controller: criação do Flask app e endpoints
"""
