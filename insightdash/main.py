from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from insightdash.config import settings
from insightdash.logging_setup import configure_logging
from insightdash.routes.analysis import router as analysis_router
from insightdash.routes.cleaning import router as cleaning_router
from insightdash.routes.upload import router as upload_router

configure_logging()

app = FastAPI(title="InsightDash API", version="1.0.0", debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    return {"message": "InsightDash API is running", "version": "1.0.0"}


@app.get("/health")
def health():
    return {"status": "healthy"}


app.include_router(upload_router)
app.include_router(cleaning_router)
app.include_router(analysis_router)
