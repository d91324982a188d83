"""Refresh token SQL queries.

Parameterized by schema and by the column list of the data model. Every
query is scoped by ``tenant_code = $1``.
"""

REFRESH_TOKEN_GET_BY_USER_ID = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1 AND user_id = $2
    ORDER BY id ASC
"""

REFRESH_TOKEN_GET_BY_TOKEN_HASH = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1 AND token_hash = $2
"""

REFRESH_TOKEN_GET_ACTIVE_BY_FAMILY_ID = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1 AND family_id = $2 AND status = $3
    ORDER BY id ASC
"""
