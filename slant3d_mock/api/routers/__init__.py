import importlib
import pkgutil

from fastapi import FastAPI

# Literal paths such as /api/order/estimate must win over /api/order/{order_id}
ROUTER_ORDER = ["dashboard", "filaments", "slicer", "estimate", "orders", "webhooks", "health"]


def _module_rank(name: str):
    return (ROUTER_ORDER.index(name) if name in ROUTER_ORDER else len(ROUTER_ORDER), name)


def include_routers(app: FastAPI):
    """
    Import every module in this package that defines ``router`` and mount it.
    Each module sets its own prefix. ``ROUTER_ORDER`` modules go first, the rest
    alphabetically.
    """
    names = sorted((name for _, name, _ in pkgutil.iter_modules(__path__)), key=_module_rank)
    for name in names:
        module = importlib.import_module(f"{__name__}.{name}")
        router = getattr(module, "router", None)
        if router is not None:
            app.include_router(router)
