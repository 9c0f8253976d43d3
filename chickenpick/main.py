from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from chickenpick.routes.admin_uploads import router as admin_uploads_router
from chickenpick.routes.menus import router as menus_router
from chickenpick.routes.reviews import router as reviews_router
from chickenpick.routes.community import router as community_router
# Инициализация кастомных логгеров, чтобы они точно повесили хендлеры
from chickenpick.logging_config import app_logger, upload_logger, catalog_logger, community_logger  # noqa: F401

app = FastAPI(title="ChickenPick")

# Подключение маршрутов
app.include_router(admin_uploads_router)
# /api/menus/{id}/reviews должен стоять раньше карточки /api/menus/{id:path}
app.include_router(reviews_router)
app.include_router(menus_router)
app.include_router(community_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        app_logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
async def health():
    return {"status": "ok"}
