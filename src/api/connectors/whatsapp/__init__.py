"""Conector WhatsApp - adapter de borda para Meta Graph API.

Único ponto de IO HTTP para o canal WhatsApp:
- Webhook (receive, verify, signature)
- HTTP client para Graph API
- Erros do Graph API
"""

from .http_base import HttpClientConfig, HttpError
from .http_client import WhatsAppApiRequestError, WhatsAppHttpClient, create_whatsapp_http_client
from .meta_errors import WhatsAppApiError, is_permanent_error, parse_meta_error
from .signature import SignatureResult, verify_meta_signature

__all__ = [
    "HttpClientConfig",
    "HttpError",
    "SignatureResult",
    "WhatsAppApiError",
    "WhatsAppApiRequestError",
    "WhatsAppHttpClient",
    "create_whatsapp_http_client",
    "is_permanent_error",
    "parse_meta_error",
    "verify_meta_signature",
]
