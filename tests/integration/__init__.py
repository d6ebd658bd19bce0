"""
Integration tests package.

- test_sql_repositories.py: repositorios SQLAlchemy (bookings, outbox,
  cascadas) y creaciones concurrentes sobre SQLite en archivo.
- test_deadlock_retry.py: detección de errores de lock y retry con backoff.

Para ejecutar solo tests de integración:
    pytest tests/integration/
"""
