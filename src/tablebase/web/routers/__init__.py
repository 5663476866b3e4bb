from tablebase.web.routers.bases import router as bases_router
from tablebase.web.routers.fields import router as fields_router
from tablebase.web.routers.options import router as options_router
from tablebase.web.routers.positions import router as positions_router
from tablebase.web.routers.records import router as records_router
from tablebase.web.routers.values import router as values_router

__all__ = [
    "bases_router",
    "fields_router",
    "options_router",
    "positions_router",
    "records_router",
    "values_router",
]
