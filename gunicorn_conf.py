# Gunicorn configuration file

import gc
import os

wsgi_app = "cep_gateway.main:app"
worker_class = "uvicorn.workers.UvicornWorker"
bind = f"{os.getenv('HOST', '0.0.0.0')}:{os.getenv('PORT', '8000')}"
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
# Provider 调用本身有超时上限，这里只兜底
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = 30


def when_ready(server):
    """
    Called just after the server is started.
    Freeze GC before forking workers to optimize Copy-on-Write memory sharing.
    """
    gc.freeze()
    server.log.info("GC frozen for Copy-on-Write optimization")
    server.log.info(f"Objects in permanent generation: {gc.get_freeze_count()}")


def post_fork(server, worker):
    # 每个 worker 各自持有轮转游标与内存缓存；需要共享缓存时使用 CEP_CACHE_BACKEND=redis
    server.log.info(f"Worker {worker.pid} started (cache backend: {os.getenv('CEP_CACHE_BACKEND', 'memory')})")
