# pizza_service/crosscutting/pagination.py
"""
===============================================================================
MÓDULO: Utilidades de paginación (page / offset)
===============================================================================

Objetivo
--------
Paginación simple por número de página (1-indexed) para el historial de pedidos:
- parse_page: normaliza el query param (default 1 si falta o no es numérico)
- get_offset: aritmética pura de offset (0-indexed)
===============================================================================
"""

from __future__ import annotations

from typing import Any

DEFAULT_PAGE = 1

# R: OFFSET es bigint en PostgreSQL
MAX_OFFSET = 2**63 - 1


def parse_page(raw: Any) -> int:
    """
    Normaliza el número de página recibido.

    - None / "" / no numérico => 1
    - Valores < 1 => 1
    """
    if raw is None or isinstance(raw, bool):
        return DEFAULT_PAGE
    try:
        page = int(str(raw).strip())
    except ValueError:
        return DEFAULT_PAGE
    return max(DEFAULT_PAGE, page)


def get_offset(current_page: int, list_per_page: int) -> int:
    """
    Offset 0-indexed: (page - 1) * page_size, con page < 1 tratado como 1.

    Acotado a MAX_OFFSET: una página enorme es una página vacía, no un error.
    """
    page = max(DEFAULT_PAGE, int(current_page))
    return min((page - 1) * max(0, int(list_per_page)), MAX_OFFSET)
