"""
============================================================
TARJETA CRC - infrastructure/__init__.py
============================================================
Module: infrastructure (Adapters)

Responsibilities:
  - Agrupar los adaptadores de salida: pool/transacciones (db/) y
    repositorios concretos (repositories/).

Policy:
  - Sin re-exports: importar desde `infrastructure.db` o
    `infrastructure.repositories` para no abrir el pool al importar.
============================================================
"""
