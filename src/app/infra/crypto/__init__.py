"""Módulo de criptografia para WhatsApp Flows.

Implementa RSA-OAEP/AES-GCM dos Flows (descriptografia de requests,
criptografia de responses) e a validação HMAC dos webhooks Meta.

Localizado em app/infra/ para manter boundaries corretas:
- app/ não importa de api/ (exceto via bootstrap)
- Este módulo pode ser usado por services em app/
"""

from .constants import AES_KEY_SIZES_ALLOWED, IV_SIZE, TAG_SIZE
from .errors import FlowCryptoError, FlowKeyMismatchError
from .flow_encryption import (
    DecryptedFlowRequest,
    decrypt_flow_request,
    encrypt_flow_response,
    flip_iv,
)
from .keys import (
    decrypt_aes_key,
    load_private_key,
    normalize_private_key_pem,
    public_key_pem,
)
from .signature import compute_signature, validate_flow_signature

__all__ = [
    "AES_KEY_SIZES_ALLOWED",
    "IV_SIZE",
    "TAG_SIZE",
    "DecryptedFlowRequest",
    "FlowCryptoError",
    "FlowKeyMismatchError",
    "compute_signature",
    "decrypt_aes_key",
    "decrypt_flow_request",
    "encrypt_flow_response",
    "flip_iv",
    "load_private_key",
    "normalize_private_key_pem",
    "public_key_pem",
    "validate_flow_signature",
]
