"""Criptografia para endpoint de WhatsApp Flows (data exchange)."""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.infra.crypto.constants import IV_FLIP_MASK, TAG_SIZE
from app.infra.crypto.errors import FlowCryptoError, FlowKeyMismatchError
from app.infra.crypto.keys import decrypt_aes_key, load_private_key

_URLSAFE_B64 = re.compile(r"[A-Za-z0-9_\-]+={0,2}")


@dataclass(frozen=True, slots=True)
class DecryptedFlowRequest:
    """Payload descriptografado + material para resposta criptografada.

    A chave AES e o IV existem apenas durante a requisição; nunca
    são persistidos.
    """

    payload: dict[str, Any]
    aes_key: bytes
    iv: bytes


def flip_iv(iv: bytes) -> bytes:
    """Inverte todos os bits do IV (XOR 0xFF byte a byte).

    A Meta exige o IV invertido na criptografia da resposta.
    """
    return bytes(byte ^ IV_FLIP_MASK for byte in iv)


def _decode_base64(raw_value: str, field_name: str) -> bytes:
    value = raw_value.strip()
    padded = value + ("=" * (-len(value) % 4))
    try:
        return base64.b64decode(padded, validate=True)
    except (ValueError, binascii.Error):
        # Urlsafe só para entradas compostas de caracteres urlsafe
        if not _URLSAFE_B64.fullmatch(value):
            raise FlowCryptoError(
                f"Invalid base64 payload in {field_name}: invalid characters"
            ) from None
        try:
            return base64.urlsafe_b64decode(padded)
        except (ValueError, binascii.Error) as exc:
            raise FlowCryptoError(f"Invalid base64 payload in {field_name}: {exc}") from exc


@lru_cache(maxsize=4)
def _cached_private_key(private_key_pem: str, passphrase: str | None) -> Any:
    return load_private_key(private_key_pem, passphrase)


def decrypt_flow_request(
    *,
    encrypted_flow_data_b64: str,
    encrypted_aes_key_b64: str,
    initial_vector_b64: str,
    private_key_pem: str,
    private_key_passphrase: str | None = None,
) -> DecryptedFlowRequest:
    """Descriptografa request do endpoint de Flow.

    O formato esperado pela Meta é:
    - `encrypted_aes_key`: chave AES criptografada com RSA-OAEP (base64)
    - `initial_vector`: IV AES-GCM (base64), usado sem alteração
    - `encrypted_flow_data`: ciphertext + auth tag de 16 bytes (base64)

    Raises:
        FlowKeyMismatchError: chave AES ilegível ou tag GCM inválida
        FlowCryptoError: qualquer outra falha (base64, PEM, JSON)
    """
    iv = _decode_base64(initial_vector_b64, "initial_vector")
    flow_data = _decode_base64(encrypted_flow_data_b64, "encrypted_flow_data")
    encrypted_aes_key = _decode_base64(encrypted_aes_key_b64, "encrypted_aes_key")

    if not iv:
        raise FlowCryptoError("initial_vector is empty")
    if len(flow_data) < TAG_SIZE:
        raise FlowCryptoError("encrypted_flow_data shorter than GCM tag")

    private_key = _cached_private_key(private_key_pem, private_key_passphrase or None)
    aes_key = decrypt_aes_key(private_key, encrypted_aes_key)

    try:
        plaintext = AESGCM(aes_key).decrypt(iv, flow_data, None)
    except InvalidTag as exc:
        raise FlowKeyMismatchError("Flow payload authentication tag mismatch") from exc
    except ValueError as exc:
        raise FlowCryptoError(f"Flow payload decryption failed: {exc}") from exc

    try:
        payload = json.loads(plaintext.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FlowCryptoError(f"Flow payload is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise FlowCryptoError("Flow payload must be a JSON object")

    return DecryptedFlowRequest(payload=payload, aes_key=aes_key, iv=iv)


def encrypt_flow_response(
    *,
    response: dict[str, Any],
    aes_key: bytes,
    iv: bytes,
) -> str:
    """Criptografa resposta para Flow e retorna plaintext base64.

    A Meta espera a resposta criptografada com IV invertido (XOR 0xFF),
    retornada como texto simples contendo base64(ciphertext + tag).
    """
    if not isinstance(response, dict):
        raise FlowCryptoError("response must be a dict")

    try:
        plaintext = json.dumps(response, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        encrypted = AESGCM(aes_key).encrypt(flip_iv(iv), plaintext, None)
    except (TypeError, ValueError) as exc:
        raise FlowCryptoError(f"Flow response encryption failed: {exc}") from exc
    return base64.b64encode(encrypted).decode("utf-8")
