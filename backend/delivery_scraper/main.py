from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from delivery_scraper.api.search import router as search_router
from delivery_scraper.core.config import settings
from delivery_scraper.core.logger import logger
from delivery_scraper.services.browser_agent import browser_agent


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Delivery scraper online on :{settings.port}")
    yield
    await browser_agent.close()


app = FastAPI(title="Delivery Listing Scraper API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "x-api-key"],
)

app.include_router(search_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
