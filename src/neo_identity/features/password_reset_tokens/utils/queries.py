"""Password reset token SQL queries.

Parameterized by schema and by the column list of the data model. Every
query is scoped by ``tenant_code = $1``.
"""

PASSWORD_RESET_TOKEN_GET_BY_TOKEN_HASH = """
    SELECT {columns} FROM {schema}.{table}
    WHERE tenant_code = $1 AND token_hash = $2
"""

PASSWORD_RESET_TOKEN_DELETE_ALL_BY_USER_ID = """
    DELETE FROM {schema}.{table}
    WHERE tenant_code = $1 AND user_id = $2
"""

PASSWORD_RESET_TOKEN_DELETE_EXPIRED = """
    DELETE FROM {schema}.{table}
    WHERE tenant_code = $1 AND expires_at < $2
"""
