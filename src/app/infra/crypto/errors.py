"""Erros de criptografia para WhatsApp Flows.

A rota de Flow traduz `FlowKeyMismatchError` em HTTP 421 (o cliente
Meta renova a chave pública) e qualquer outro `FlowCryptoError` em 500.
"""


class FlowCryptoError(Exception):
    """Erro em operação criptográfica de Flow."""


class FlowKeyMismatchError(FlowCryptoError):
    """Chave AES ilegível com a chave privada atual.

    Cobre: tamanho de chave AES inválido, falha de unpadding OAEP e
    tag GCM que não confere.
    """
