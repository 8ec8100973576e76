"""Core del cliente: dominio, configuración, errores y servicios.

No depende de la CLI; los adaptadores de I/O viven en `adapters`.
"""
