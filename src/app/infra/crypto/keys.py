"""Operações de chave RSA e AES para Flows."""

from __future__ import annotations

import re
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.hashes import SHA256

from .constants import AES_KEY_SIZES_ALLOWED
from .errors import FlowCryptoError, FlowKeyMismatchError

_PEM_BLOCK = re.compile(
    r"-----BEGIN (?P<label>[A-Z ]+)-----(?P<body>.*?)-----END (?P=label)-----",
    re.DOTALL,
)

OAEP_PADDING = padding.OAEP(
    mgf=padding.MGF1(algorithm=SHA256()),
    algorithm=SHA256(),
    label=None,
)


def normalize_private_key_pem(raw_pem: str) -> str:
    """Normaliza PEM vindo de variável de ambiente.

    Aceita `\\n` literais e PEM em linha única com o corpo separado
    por espaços, reconstruindo o formato de 64 colunas.
    """
    pem = raw_pem.strip().replace("\\n", "\n")
    match = _PEM_BLOCK.search(pem)
    if match is None:
        return pem

    raw_body = match.group("body")
    if ":" in raw_body:
        # PEM legado com cabeçalhos (Proc-Type/DEK-Info): manter como está
        return pem

    body = "".join(raw_body.split())
    label = match.group("label")
    lines = [body[i : i + 64] for i in range(0, len(body), 64)]
    return "\n".join([f"-----BEGIN {label}-----", *lines, f"-----END {label}-----"]) + "\n"


def load_private_key(private_key_pem: str, passphrase: str | None = None) -> Any:
    """Carrega chave privada RSA em formato PEM.

    Args:
        private_key_pem: Chave privada em formato PEM (normalizada aqui)
        passphrase: Senha da chave (opcional)

    Returns:
        Objeto de chave privada RSA

    Raises:
        FlowCryptoError: Se chave inválida
    """
    passphrase_bytes = passphrase.encode() if passphrase and passphrase.strip() else None
    pem_bytes = normalize_private_key_pem(private_key_pem).encode("utf-8")

    def _load(password: bytes | None) -> Any:
        return serialization.load_pem_private_key(
            pem_bytes,
            password=password,
            backend=default_backend(),
        )

    try:
        return _load(passphrase_bytes)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        # Fallback quando a chave não está criptografada, mas uma
        # passphrase foi injetada por configuração.
        exc_text = str(exc).lower()
        if passphrase_bytes and "not encrypted" in exc_text:
            try:
                return _load(None)
            except (ValueError, TypeError, UnsupportedAlgorithm) as retry_exc:
                raise FlowCryptoError(f"Invalid private key: {retry_exc}") from retry_exc
        raise FlowCryptoError(f"Invalid private key: {exc}") from exc


def public_key_pem(private_key: Any) -> str:
    """Deriva a chave pública (SubjectPublicKeyInfo PEM) da chave privada."""
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")


def decrypt_aes_key(private_key: Any, encrypted_aes_key: bytes) -> bytes:
    """Descriptografa chave AES criptografada com RSA-OAEP (SHA-256).

    Args:
        private_key: Chave privada RSA
        encrypted_aes_key: Chave AES criptografada (bytes já decodificados)

    Returns:
        Chave AES bruta (128 ou 256 bits)

    Raises:
        FlowKeyMismatchError: Se OAEP falhar ou o tamanho for inválido
    """
    try:
        aes_key = private_key.decrypt(encrypted_aes_key, OAEP_PADDING)
    except ValueError as exc:
        raise FlowKeyMismatchError(f"AES key decryption failed: {exc}") from exc

    if len(aes_key) not in AES_KEY_SIZES_ALLOWED:
        raise FlowKeyMismatchError(f"Invalid AES key size: {len(aes_key)}")

    return aes_key
