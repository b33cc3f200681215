"""
Infrastructure Layer: adapters de los puertos de dominio.

- db/: pool PostgreSQL (psycopg_pool)
- repositories/: Postgres (SQL crudo) e in-memory (tests / local dev)
- services/: Google Sign-In, Google Calendar/Meet, fakes y reloj
"""
