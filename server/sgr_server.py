"""SGR Preview FastAPI server: turns terminal output into styled HTML."""

from __future__ import annotations

import hashlib
import socket
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

import sgr_settings
from sgr_render import PaletteError, convert

app = FastAPI(title="SGR Preview", version="1.0.0")
_security = HTTPBearer(auto_error=False)


def _verify(creds: HTTPAuthorizationCredentials | None = Depends(_security)) -> None:
    # No token configured means the server is open.
    if not sgr_settings.TOKEN:
        return
    if creds is None or creds.credentials != sgr_settings.TOKEN:
        raise HTTPException(status_code=401, detail="Invalid token")


class RenderRequest(BaseModel):
    text: str


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "hostname": socket.gethostname(),
    }


@app.post("/render")
async def post_render(body: RenderRequest, _: None = Depends(_verify)):
    if len(body.text) > sgr_settings.MAX_INPUT:
        raise HTTPException(
            status_code=413,
            detail=f"Text exceeds {sgr_settings.MAX_INPUT} characters",
        )
    try:
        result = convert(body.text)
    except PaletteError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    return {
        "spans": result.to_runs(),
        "html": result.to_html(),
        "diagnostics": result.diagnostics,
        "hash": hashlib.sha256(body.text.encode()).hexdigest()[:16],
        "ts": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    sgr_settings.configure_logging()
    uvicorn.run(app, host=sgr_settings.HOST, port=sgr_settings.PORT)
