from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query

from calltrends.core import config
from calltrends.core.alerts import get_complaint_alert
from calltrends.core.composer import EmptyQueryError, resolve_visualization_request
from calltrends.core.generator import seed_calls
from calltrends.core.llm import default_client
from calltrends.core.storage import CallStore
from calltrends.core.timewindow import resolve_range, trailing_window
from calltrends.core.views import DASHBOARD, INSIGHTS, TRENDS, UnknownViewError, run_view

_store = CallStore(seed_calls)


def get_store() -> CallStore:
    return _store


def get_chart_client():
    return default_client()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.configure_logging()
    # Generate demo data up front instead of on the first request
    _store.load()
    yield


app = FastAPI(title="Call Trends API", lifespan=lifespan)


@app.get("/health")
def health():
    return {"status": "ok", "service": "call-trends-api"}


def _view(store: CallStore, section: str, name: str, range_: Optional[str]) -> Dict[str, Any]:
    try:
        return run_view(store, name, range_, section=section)
    except UnknownViewError:
        raise HTTPException(status_code=404, detail=f"Unknown view: {name}")


@app.get("/api/trends/{name}")
def trends(name: str, range_: Optional[str] = Query(None, alias="range"), store: CallStore = Depends(get_store)):
    return _view(store, TRENDS, name, range_)


@app.get("/api/insights/{name}")
def insights(name: str, range_: Optional[str] = Query(None, alias="range"), store: CallStore = Depends(get_store)):
    return _view(store, INSIGHTS, name, range_)


@app.get("/api/dashboard/{name}")
def dashboard(name: str, range_: Optional[str] = Query(None, alias="range"), store: CallStore = Depends(get_store)):
    return _view(store, DASHBOARD, name, range_)


@app.get("/api/calls")
def calls(range_: str = Query("24h", alias="range"), limit: int = 50, intent: Optional[str] = None,
          topic: Optional[str] = None, complaints: bool = False, store: CallStore = Depends(get_store)):
    rows = store.list_calls(resolve_range(range_), intent=intent, topic=topic,
                            complaints_only=complaints, limit=limit)
    return {"calls": [c.to_dict() for c in rows]}


@app.get("/api/calls/{call_id}")
def call_detail(call_id: str, store: CallStore = Depends(get_store)):
    call = store.get(call_id)
    if call is None:
        raise HTTPException(status_code=404, detail="Call not found")
    return call.to_dict()


@app.get("/api/alerts/complaints")
def complaint_alert(store: CallStore = Depends(get_store)):
    window = trailing_window(config.ALERT_WINDOW_MINUTES)
    return get_complaint_alert(store.in_window(window))


@app.post("/api/copilot/visualization")
def copilot_visualization(payload: Dict[str, Any] = Body(...), client=Depends(get_chart_client)):
    query = str(payload.get("query") or payload.get("text") or "")
    try:
        return resolve_visualization_request(query, client)
    except EmptyQueryError:
        raise HTTPException(status_code=400, detail="Missing query")


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = False):
    import uvicorn

    uvicorn.run("server.app:app", host=host, port=port, reload=reload, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run_server(reload=True)
