"""Modelos y entidades del dominio.

Por qué:
- Aquí viven los valores puros (Pydantic v2) y la taxonomía de errores.
- El dominio no conoce sockets ni CLI: solo conceptos del protocolo.
"""
