"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_scheduling_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional).
  - Definir users (directorio), user_roles (rol por email) y slots.
  - Garantizar en la DB las reglas que no pueden depender de la app:
      * CHECK de roles y estados válidos
      * end_time > start_time
      * slots del mismo faculty/fecha sin solapamiento (exclusion constraint)
  - Mantener updated_at vía trigger en slots y user_roles.

Collaborators:
  - PostgreSQL 16+ con extensiones pgcrypto y btree_gist
  - Alembic (framework de migraciones)
  - infrastructure/repositories/postgres/* (usan este esquema como contrato)

Policy:
  - Esta es una migración BASELINE. Downgrade NO soportado.
  - Toda evolución futura del esquema debe hacerse con migraciones aditivas (002+).
  - Convención de nombres (constraints / indexes):
      pk_<tabla>                         - Primary keys
      uq_<tabla>_<col>                   - Unique constraints
      ix_<tabla>_<col>                   - Indexes
      ck_<tabla>_<regla>                 - Check constraints
      fk_<tabla>_<col>__<ref_tabla>      - Foreign keys
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# ============================================================
# Alembic identifiers
# ============================================================
revision: str = "001_scheduling_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ROLES_SQL = "('scholar', 'faculty', 'admin')"
_STATUSES_SQL = "('available', 'booked', 'cancelled', 'completed')"


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp(name: str, *, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=nullable,
    )


def upgrade() -> None:
    """
    Crea el esquema fundacional completo.

    Orden:
      1) Extensiones
      2) Identity (users, user_roles)
      3) Slots (+ exclusion constraint)
      4) Triggers updated_at
    """

    # =========================================================
    # 1) EXTENSIONS
    # =========================================================
    # gen_random_uuid()
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")
    # Igualdad sobre uuid/date dentro de un índice GiST (EXCLUDE USING gist).
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # =========================================================
    # 2) IDENTITY
    # =========================================================
    op.create_table(
        "users",
        _uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("picture", sa.Text, nullable=True),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'scholar'"),
        ),
        _timestamp("created_at"),
        _timestamp("last_login_at", nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("google_id", name="uq_users_google_id"),
        sa.CheckConstraint(f"role IN {_ROLES_SQL}", name="ck_users_role"),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # Rol autoritativo por email: puede existir antes que el usuario.
    op.create_table(
        "user_roles",
        _uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'scholar'"),
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_user_roles"),
        sa.UniqueConstraint("email", name="uq_user_roles_email"),
        sa.CheckConstraint(f"role IN {_ROLES_SQL}", name="ck_user_roles_role"),
    )
    op.create_index("ix_user_roles_role", "user_roles", ["role"])

    # =========================================================
    # 3) SLOTS
    # =========================================================
    op.create_table(
        "slots",
        _uuid_pk(),
        sa.Column("faculty_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("scholar_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("start_time", sa.Time, nullable=False),
        sa.Column("end_time", sa.Time, nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'available'"),
        ),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("meeting_link", sa.Text, nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_slots"),
        sa.ForeignKeyConstraint(
            ["faculty_id"],
            ["users.id"],
            name="fk_slots_faculty_id__users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["scholar_id"],
            ["users.id"],
            name="fk_slots_scholar_id__users",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint(f"status IN {_STATUSES_SQL}", name="ck_slots_status"),
        sa.CheckConstraint("end_time > start_time", name="ck_slots_time_range"),
    )

    # Índices según queries reales (listados por faculty/scholar/fecha/estado).
    op.create_index("ix_slots_faculty_id", "slots", ["faculty_id"])
    op.create_index("ix_slots_scholar_id", "slots", ["scholar_id"])
    op.create_index("ix_slots_date", "slots", ["date"])
    op.create_index("ix_slots_status", "slots", ["status"])
    op.create_index("ix_slots_date_status", "slots", ["date", "status"])

    # Sólo slots bloqueantes (available/booked) compiten por el horario.
    # tsrange '[)' hace que slots contiguos (10:00-11:00, 11:00-12:00) convivan.
    op.execute(
        """
        ALTER TABLE slots ADD CONSTRAINT slots_no_overlap
        EXCLUDE USING gist (
            faculty_id WITH =,
            date WITH =,
            tsrange(date + start_time, date + end_time, '[)') WITH &&
        )
        WHERE (status IN ('available', 'booked'))
        """
    )

    # =========================================================
    # 4) TRIGGERS updated_at
    # =========================================================
    op.execute(
        """
        CREATE OR REPLACE FUNCTION set_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        """
    )
    for table in ("slots", "user_roles"):
        op.execute(
            f"""
            CREATE TRIGGER trg_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION set_updated_at()
            """
        )


def downgrade() -> None:
    """
    Downgrade NO soportado para la migración fundacional.

    Política: esta es la base del esquema.
    Para resetear el entorno local: recrear la base y correr `alembic upgrade head`.
    """
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrearla y correr: alembic upgrade head"
    )
