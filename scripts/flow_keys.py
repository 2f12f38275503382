#!/usr/bin/env python3
"""Diagnóstico das chaves RSA dos WhatsApp Flows.

Uso:
    python scripts/flow_keys.py public-key             # deriva a pública de WHATSAPP_FLOW_PRIVATE_KEY
    python scripts/flow_keys.py public-key --key-file chave.pem
    python scripts/flow_keys.py generate --out-dir ./keys
    python scripts/flow_keys.py self-test              # round-trip RSA-OAEP/AES-GCM local

A chave pública derivada é a que deve estar registrada na Meta; se
divergir, o endpoint de Flows responde 421.
"""

from __future__ import annotations

import argparse
import base64
import json
import os
import sys
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.infra.crypto import (
    FlowCryptoError,
    decrypt_flow_request,
    encrypt_flow_response,
    flip_iv,
    load_private_key,
    public_key_pem,
)
from app.infra.crypto.keys import OAEP_PADDING

KEY_SIZE = 2048
SELF_TEST_PAYLOAD = {"version": "3.0", "action": "ping"}


def read_private_key(key_file: str | None) -> str:
    if key_file:
        return Path(key_file).read_text(encoding="utf-8")
    pem = os.getenv("WHATSAPP_FLOW_PRIVATE_KEY", "")
    if not pem:
        raise SystemExit("WHATSAPP_FLOW_PRIVATE_KEY não configurado (ou use --key-file)")
    return pem


def build_envelope(
    public_key: object,
    payload: dict,
    *,
    aes_key_size: int = 16,
) -> tuple[dict[str, str], bytes, bytes]:
    """Monta um envelope igual ao que a Meta envia ao endpoint."""
    aes_key = os.urandom(aes_key_size)
    iv = os.urandom(16)
    encrypted_data = AESGCM(aes_key).encrypt(iv, json.dumps(payload).encode("utf-8"), None)
    encrypted_key = public_key.encrypt(aes_key, OAEP_PADDING)  # type: ignore[attr-defined]
    envelope = {
        "encrypted_flow_data": base64.b64encode(encrypted_data).decode("ascii"),
        "encrypted_aes_key": base64.b64encode(encrypted_key).decode("ascii"),
        "initial_vector": base64.b64encode(iv).decode("ascii"),
    }
    return envelope, aes_key, iv


def self_test(private_pem: str, passphrase: str | None) -> list[str]:
    """Executa o round-trip completo e devolve as falhas (vazio = OK)."""
    failures: list[str] = []
    private_key = load_private_key(private_pem, passphrase)
    for aes_key_size in (16, 32):
        envelope, aes_key, iv = build_envelope(
            private_key.public_key(), SELF_TEST_PAYLOAD, aes_key_size=aes_key_size
        )
        try:
            decrypted = decrypt_flow_request(
                encrypted_flow_data_b64=envelope["encrypted_flow_data"],
                encrypted_aes_key_b64=envelope["encrypted_aes_key"],
                initial_vector_b64=envelope["initial_vector"],
                private_key_pem=private_pem,
                private_key_passphrase=passphrase,
            )
        except FlowCryptoError as exc:
            failures.append(f"AES-{aes_key_size * 8}: decrypt falhou ({exc})")
            continue
        if decrypted.payload != SELF_TEST_PAYLOAD or decrypted.aes_key != aes_key:
            failures.append(f"AES-{aes_key_size * 8}: payload ou chave divergente")
            continue

        response = {"version": "3.0", "data": {"status": "active"}}
        encrypted = encrypt_flow_response(response=response, aes_key=aes_key, iv=iv)
        plaintext = AESGCM(aes_key).decrypt(flip_iv(iv), base64.b64decode(encrypted), None)
        if json.loads(plaintext) != response:
            failures.append(f"AES-{aes_key_size * 8}: resposta não confere com IV invertido")
    return failures


def cmd_public_key(args: argparse.Namespace) -> int:
    private_key = load_private_key(read_private_key(args.key_file), args.passphrase)
    print(public_key_pem(private_key), end="")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=KEY_SIZE)
    encryption: serialization.KeySerializationEncryption = serialization.NoEncryption()
    if args.passphrase:
        encryption = serialization.BestAvailableEncryption(args.passphrase.encode("utf-8"))
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption,
    ).decode("utf-8")

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "flow_private.pem").write_text(private_pem, encoding="utf-8")
    (out_dir / "flow_public.pem").write_text(public_key_pem(private_key), encoding="utf-8")
    print(f"Chaves gravadas em {out_dir} (flow_private.pem, flow_public.pem)")
    return 0


def cmd_self_test(args: argparse.Namespace) -> int:
    failures = self_test(read_private_key(args.key_file), args.passphrase)
    if failures:
        for failure in failures:
            print(f"FAIL {failure}")
        return 1
    print("OK RSA-OAEP/AES-GCM round-trip (AES-128 e AES-256)")
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    public = subparsers.add_parser("public-key", help="Deriva a chave pública")
    public.add_argument("--key-file", default=None, help="PEM da chave privada")
    public.add_argument("--passphrase", default=os.getenv("WHATSAPP_FLOW_PRIVATE_KEY_PASSPHRASE"))
    public.set_defaults(handler=cmd_public_key)

    generate = subparsers.add_parser("generate", help="Gera novo par RSA-2048")
    generate.add_argument("--out-dir", default=".", help="Diretório de saída")
    generate.add_argument("--passphrase", default=None, help="Criptografa a chave privada")
    generate.set_defaults(handler=cmd_generate)

    test = subparsers.add_parser("self-test", help="Round-trip local de criptografia")
    test.add_argument("--key-file", default=None, help="PEM da chave privada")
    test.add_argument("--passphrase", default=os.getenv("WHATSAPP_FLOW_PRIVATE_KEY_PASSPHRASE"))
    test.set_defaults(handler=cmd_self_test)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        return args.handler(args)
    except FlowCryptoError as exc:
        print(f"Erro de chave: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
