"""Adaptadores de I/O: HTTP contra la API y escritura de capturas a disco."""
