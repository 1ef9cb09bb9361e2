"""Helpers de validación para el secreto compartido de los webhooks de Vapi."""

import hmac


class SignatureError(Exception):
    """Excepción genérica para secretos de webhook inválidos."""


def verify_shared_secret(expected: str, received: str | None) -> None:
    """Compara el secreto recibido contra el configurado en tiempo constante.

    Args:
        expected: Secreto configurado para el servidor.
        received: Valor recibido en el encabezado `x-vapi-secret`.
    """
    if not received or not hmac.compare_digest(expected.encode(), received.encode()):
        raise SignatureError("Invalid webhook secret received")


def mask_secret(value: str | None) -> str | None:
    """Enmascara secretos para logging seguro."""
    if not value:
        return value
    if len(value) <= 4:
        return "***"
    return f"{value[:2]}***{value[-2:]}"
