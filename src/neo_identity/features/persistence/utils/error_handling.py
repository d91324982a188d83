"""Standardized error handling for storage collaborators.

Storage failures never escape a collaborator as exceptions. They are logged
with operation context, recorded on the ExecutionContext and turned into the
operation's neutral result (None, False, 0 or an empty list).
ConcurrencyConflictError and cancellation are the exceptions that propagate.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional

from ....core.exceptions import ConcurrencyConflictError
from ....core.shared.context import ExecutionContext

logger = logging.getLogger(__name__)


def _find_context(args: tuple, kwargs: Dict[str, Any]) -> Optional[ExecutionContext]:
    ctx = kwargs.get("ctx")
    if ctx is not None:
        return ctx
    for arg in args:
        if isinstance(arg, ExecutionContext):
            return arg
    return None


def handle_storage_error(
    operation_name: str,
    default_return: Any = None,
    log_level: int = logging.ERROR,
):
    """Decorator for collaborator methods taking ``(self, ctx, ...)``.

    Args:
        operation_name: Name of the operation for logging
        default_return: Value returned when the operation fails; callables
            are invoked to build a fresh value
        log_level: Logging level for unexpected failures

    Usage:
        @handle_storage_error("get_by_id")
        async def get_by_id(self, ctx, id, cancellation_token):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs) -> Any:
            try:
                return await func(self, *args, **kwargs)

            except ConcurrencyConflictError:
                raise

            except Exception as e:
                ctx = _find_context(args, kwargs)
                operation_context = {
                    "operation": operation_name,
                    "repository": type(self).__name__,
                    "table": getattr(self, "_table", None),
                }
                if ctx is not None:
                    operation_context["correlation_id"] = str(ctx.correlation_id)
                    operation_context["tenant_code"] = str(ctx.tenant_info.code)
                context_str = ", ".join(f"{k}={v}" for k, v in operation_context.items())
                logger.log(
                    log_level,
                    f"Failed to {operation_name}: {e} | Context: {context_str}",
                    exc_info=e,
                )

                if ctx is not None:
                    ctx.add_exception(e)

                return default_return() if callable(default_return) else default_return

        return wrapper
    return decorator


def rows_affected(status: Optional[str]) -> int:
    """Parse the row count from a command status such as ``'DELETE 3'``."""
    if not status:
        return 0
    try:
        return int(status.rsplit(" ", 1)[-1])
    except ValueError:
        return 0
