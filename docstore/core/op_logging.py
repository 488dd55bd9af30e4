import contextvars
import functools
import logging
import sys
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, TypeVar

from docstore.config import AppSettings
from docstore.errors import StoreError

correlation_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="")

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter to inject the correlation_id into log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get()
        return True


logger = logging.getLogger(__name__)
logger.addFilter(CorrelationIdFilter())


def configure_logging(settings: AppSettings) -> None:
    """Configure root logging for a host process using the store."""
    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )


def _fmt_ctx(ctx: Dict[str, Any]) -> str:
    """Return a deterministic key=value string used in log messages."""
    return " ".join(f"{k}={v}" for k, v in ctx.items() if v is not None)


def logged_operation(func: F) -> F:
    """
    Wrap a store coroutine with structured logs, a correlation id and timing.

    Nested operations (``push`` calling ``get`` and ``set``) share the
    correlation id of the outermost call.
    """

    @functools.wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        cid = correlation_id_ctx.get()
        token = None
        if not cid:
            cid = str(uuid.uuid4())
            token = correlation_id_ctx.set(cid)

        ctx = {
            "correlation_id": cid,
            "collection": self.name,
            "operation": func.__name__,
            "key": args[0] if args else kwargs.get("key"),
        }
        logger.debug(f"Store operation {_fmt_ctx(ctx)}", extra=ctx)

        start_time = time.monotonic()
        try:
            return await func(self, *args, **kwargs)

        except StoreError as e:
            warn_ctx = {**ctx, "error": str(e)}
            logger.warning(f"Store operation rejected {_fmt_ctx(warn_ctx)}", extra=warn_ctx)
            raise

        except Exception as e:
            exc_ctx = {**ctx, "error": str(e)}
            logger.exception(f"Store operation failed {_fmt_ctx(exc_ctx)}", extra=exc_ctx)
            raise

        finally:
            elapsed_ms = int((time.monotonic() - start_time) * 1000)
            done_ctx = {**ctx, "execution_time_ms": elapsed_ms}
            logger.debug(f"Store operation processed {_fmt_ctx(done_ctx)}", extra=done_ctx)
            if token is not None:
                correlation_id_ctx.reset(token)

    return wrapper  # type: ignore[return-value]
