"""Receptor de webhooks que convierte transcripciones de llamadas en pedidos."""

__version__ = "0.1.0"
