"""Contrato de instrucciones para el servicio de extracción.

El texto funciona como esquema de salida: cualquier cambio debe incrementar
`EXTRACTION_PROMPT_VERSION` para que el comportamiento sea auditable.
"""

EXTRACTION_PROMPT_VERSION = "2024-06-01"

EXTRACTION_FIELDS = ("caller_name", "phone_number", "order", "quantity")

EXTRACTION_SYSTEM_PROMPT = (
    "You are an AI that extracts order details from a phone call transcript. "
    "Return a JSON with these fields: caller_name, phone_number, order, quantity. "
    "Use 'Unknown' if something is missing."
)


def render_transcript_message(transcript: str) -> str:
    """Construye el contenido de usuario que acompaña a la instrucción."""
    return f"Transcript:\n\n{transcript}"
