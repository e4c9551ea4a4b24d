from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
import logging
from dotenv import load_dotenv

from db import init_db
from college_pool.routes import router as pool_router

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(title="College Pool API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()

app.include_router(pool_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok", "time": datetime.utcnow().isoformat()}
