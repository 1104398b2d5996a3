import logging

from fastapi import FastAPI

from core.config import settings
from routers import auth_router, poems_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="地図らし紀行")
app.include_router(auth_router)
app.include_router(poems_router)


if __name__ == "__main__":
    print("Запуск FastAPI приложения...")
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
