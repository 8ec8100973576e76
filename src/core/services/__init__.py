"""Servicios de orquestación (pipeline de capturas)."""
