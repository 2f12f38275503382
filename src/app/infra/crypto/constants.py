"""Constantes criptográficas para WhatsApp Flows."""

AES_KEY_SIZES_ALLOWED = (16, 32)  # AES-128-GCM / AES-256-GCM
IV_SIZE = 16  # IV enviado pela Meta em initial_vector
TAG_SIZE = 16  # 128 bits, anexado ao final do ciphertext
IV_FLIP_MASK = 0xFF
