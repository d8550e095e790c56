from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Transaction Feed", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/feed_stub") if os.path.exists("/feed_stub") else Path(__file__).resolve().parents[1] / "feed_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/feed/transactions")
def get_transactions(account: str):
    file = DATA_DIR / f"transactions_{account}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail="account not found")
    return JSONResponse(content=json.loads(file.read_text(encoding="utf-8")))
