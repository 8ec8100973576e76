"""Logging explícito para componentes del cliente.

Por qué inyectado:
- Cada componente recibe su `logging.Logger`; no hay interruptor global.
- Por defecto se usa un logger mudo, así la librería no escribe nada
  salvo que el llamador lo pida (`verbose`) o la CLI configure handlers.
"""

from __future__ import annotations

import logging

LOGGER_NAME = "geoscreenshot"
_NULL_LOGGER_NAME = "geoscreenshot.null"


def null_logger() -> logging.Logger:
    logger = logging.getLogger(_NULL_LOGGER_NAME)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def get_logger(verbose: bool = False) -> logging.Logger:
    """Logger del paquete si `verbose`, logger mudo en otro caso.

    Fuera de la CLI no hay handlers configurados: con `verbose` se añade un
    `StreamHandler` a stderr para que los mensajes se vean sin más.
    """

    if not verbose:
        return null_logger()
    logger = logging.getLogger(LOGGER_NAME)
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger


def configure_cli_logging(*, verbose: bool = False) -> logging.Logger:
    """Instala un `RichHandler` para la CLI (INFO, o DEBUG con --verbose)."""

    from rich.logging import RichHandler  # noqa: PLC0415

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # Sustituye el StreamHandler que `get_logger` pudo dejar antes.
    logger.handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=verbose)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
