"""001 – Initial schema: employee, jurisdiction and audit-trail tables.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 10:30:00.000000+05:30
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── 1. eg_hrms_employee_v3 ────────────────────────────────────────────
    op.execute("""
        CREATE TABLE eg_hrms_employee_v3 (
            id                   UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            code                 VARCHAR(64),
            user_id              VARCHAR(64),
            individual_id        VARCHAR(64),
            status               VARCHAR(20)  NOT NULL DEFAULT 'ACTIVE',
            employee_type        VARCHAR(50)  NOT NULL,
            date_of_appointment  TIMESTAMPTZ,
            department           VARCHAR(64)  NOT NULL,
            designation          VARCHAR(64)  NOT NULL,
            phone                VARCHAR(20),
            email                VARCHAR(255),
            is_active            BOOLEAN      NOT NULL DEFAULT TRUE,
            tenant_id            VARCHAR(64)  NOT NULL,
            created_by           VARCHAR(64)  NOT NULL,
            last_modified_by     VARCHAR(64),
            created_time         BIGINT       NOT NULL,
            last_modified_time   BIGINT,
            CONSTRAINT uk_employee_code_tenant UNIQUE (code, tenant_id)
        )
    """)
    op.execute("CREATE INDEX ix_eg_hrms_employee_v3_code ON eg_hrms_employee_v3 (code)")
    op.execute(
        "CREATE INDEX ix_eg_hrms_employee_v3_tenant_id ON eg_hrms_employee_v3 (tenant_id)"
    )

    # ── 2. eg_hrms_jurisdiction_v3 ────────────────────────────────────────
    op.execute("""
        CREATE TABLE eg_hrms_jurisdiction_v3 (
            id                   UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id          UUID    NOT NULL,
            boundary_relation    JSONB   NOT NULL DEFAULT '[]'::jsonb,
            is_active            BOOLEAN NOT NULL DEFAULT TRUE,
            tenant_id            VARCHAR(64) NOT NULL,
            created_by           VARCHAR(64) NOT NULL,
            last_modified_by     VARCHAR(64),
            created_time         BIGINT  NOT NULL,
            last_modified_time   BIGINT,
            CONSTRAINT fk_jurisdiction_employee FOREIGN KEY (employee_id)
                REFERENCES eg_hrms_employee_v3 (id) ON DELETE CASCADE
        )
    """)
    op.execute(
        "CREATE INDEX ix_eg_hrms_jurisdiction_v3_employee_id "
        "ON eg_hrms_jurisdiction_v3 (employee_id)"
    )
    op.execute(
        "CREATE INDEX ix_eg_hrms_jurisdiction_v3_tenant_id "
        "ON eg_hrms_jurisdiction_v3 (tenant_id)"
    )
    # containment lookups on boundary codes
    op.execute(
        "CREATE INDEX ix_eg_hrms_jurisdiction_v3_boundary_relation "
        "ON eg_hrms_jurisdiction_v3 USING GIN (boundary_relation)"
    )

    # ── 3. hrms_audit_trail ───────────────────────────────────────────────
    op.execute("""
        CREATE TABLE hrms_audit_trail (
            id            UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            tenant_id     VARCHAR(64) NOT NULL,
            actor         VARCHAR(64) NOT NULL,
            action        VARCHAR(50) NOT NULL,
            entity_type   VARCHAR(50) NOT NULL,
            entity_id     UUID        NOT NULL,
            old_values    JSON,
            new_values    JSON,
            created_time  BIGINT      NOT NULL
        )
    """)
    op.execute(
        "CREATE INDEX ix_audit_trail_entity ON hrms_audit_trail (entity_type, entity_id)"
    )
    op.execute("CREATE INDEX ix_audit_trail_tenant ON hrms_audit_trail (tenant_id)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "hrms_audit_trail",
        "eg_hrms_jurisdiction_v3",
        "eg_hrms_employee_v3",
    ]
    for table in tables:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
