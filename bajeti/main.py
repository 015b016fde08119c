from contextlib import asynccontextmanager

from fastapi import FastAPI

from .db.core import init_db
from .logging_config import setup_logging, get_logger
from .routers.users import router as users_router
from .routers.categories import router as categories_router
from .routers.accounts import router as accounts_router
from .routers.transactions import router as transactions_router
from .routers.budgets import router as budgets_router
from .routers.reports import router as reports_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    init_db()
    get_logger(__name__).info("Bajeti API started")
    yield


app = FastAPI(title="Bajeti API", lifespan=lifespan)

app.include_router(users_router)
app.include_router(categories_router)
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(budgets_router)
app.include_router(reports_router)


@app.get("/")
def read_root():
    return "Server is running."
