import time

from loguru import logger

async def debug_middleware(request, call_next):
    started = time.perf_counter()
    logger.debug(f"{request.method} {request.url.path} query={dict(request.query_params)}")
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")
    return response
