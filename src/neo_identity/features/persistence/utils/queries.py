"""Generic SQL templates for data model tables.

Templates are parameterized by schema and table, plus the column lists
derived from the data model dataclass. Every statement is scoped by
``tenant_code = $1``.
"""

# =====================================================================================
# READS
# =====================================================================================

DATA_MODEL_GET_BY_ID = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1 AND id = $2
"""

DATA_MODEL_EXISTS = """
    SELECT EXISTS(
        SELECT 1 FROM {schema}.{table}
        WHERE tenant_code = $1 AND id = $2
    )
"""

# =====================================================================================
# WRITES (optimistic concurrency on entity_version)
# =====================================================================================

DATA_MODEL_INSERT = """
    INSERT INTO {schema}.{table} ({columns})
    VALUES ({placeholders})
"""

DATA_MODEL_UPDATE = """
    UPDATE {schema}.{table} SET
        {assignments}
    WHERE tenant_code = $1 AND id = $2 AND entity_version = $3
"""

DATA_MODEL_DELETE = """
    DELETE FROM {schema}.{table}
    WHERE tenant_code = $1 AND id = $2 AND entity_version = $3
"""

# =====================================================================================
# ENUMERATION
# =====================================================================================

DATA_MODEL_ENUMERATE_ALL = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1
    ORDER BY id ASC
    LIMIT $2 OFFSET $3
"""

DATA_MODEL_ENUMERATE_MODIFIED_SINCE = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1 AND COALESCE(last_changed_at, created_at) >= $2
    ORDER BY COALESCE(last_changed_at, created_at) ASC, id ASC
"""
