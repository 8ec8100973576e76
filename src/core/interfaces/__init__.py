"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite que directorio e invocador se prueben con un stub de la API.
"""
