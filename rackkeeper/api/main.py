"""
FastAPI application entry point for RackKeeper.

This module exposes HTTP endpoints for running a scorekeeping session
(start a match, end turns, record games, mark 9‑ball balls, finish or
cancel), browsing the recent-match history, ordering league stats buckets
for display, and clearing locally stored data.

To run the server:

    uvicorn --factory rackkeeper.api.main:create_app --reload

or use the ``rackkeeper-api`` console script, which reads host, port and
log level from the configuration.  The automatic documentation is at
http://localhost:8000/docs
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from ..config import load_config
from ..db.scorekeeper_storage import ScorekeeperStorage
from ..db.promo_storage import PROMO_NAMESPACE, WrappedPromoStorage
from ..db.stats_storage import STATS_NAMESPACE, StatsStorage
from ..db.store import KeyValueStore, create_db_engine
from ..engine.engine import Engine
from ..errors import (
    BallIndexError,
    GameTypeError,
    IllegalTurnEndError,
    InvalidSetupError,
    InvalidWinnerError,
    MatchNotActiveError,
    ScorekeeperError,
)
from ..match import Player
from ..stats.sorting import (
    SORT_OPTIONS,
    Category,
    cycle_sort,
    default_sort,
    skill_difference_label,
    sort_entries,
    sort_label,
    win_percent,
)
from .schemas import (
    BallOut,
    GameOverIn,
    MatchCreate,
    OutcomeOut,
    QuickStartOut,
    SortedEntry,
    SortOptionOut,
    SortOptionsOut,
    SortRequest,
    SortResponse,
    StateOut,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidSetupError: 400,
    InvalidWinnerError: 400,
    BallIndexError: 400,
    GameTypeError: 400,
    IllegalTurnEndError: 409,
    MatchNotActiveError: 409,
}


def _status_for(exc: ScorekeeperError) -> int:
    for exc_type, status in _ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return status
    return 400


def create_app(config: Optional[Dict[str, Any]] = None) -> FastAPI:
    """Build the API with its own database and scorekeeping engine."""
    cfg = config if config is not None else load_config()
    db_engine = create_db_engine(cfg["database"]["url"])
    storage = ScorekeeperStorage(KeyValueStore(db_engine))
    sk_cfg = cfg["scorekeeper"]

    app = FastAPI(title="RackKeeper API", version="0.1.0")
    # One scorekeeping session per process.
    app.state.engine = Engine(
        storage,
        history_limit=int(sk_cfg["history_limit"]),
        default_target=int(sk_cfg["default_target"]),
    )
    app.state.stats = StatsStorage(
        KeyValueStore(db_engine, STATS_NAMESPACE),
        cache_seconds=float(cfg["stats"]["report_cache_seconds"]),
    )
    app.state.promo = WrappedPromoStorage(KeyValueStore(db_engine, PROMO_NAMESPACE))

    @app.exception_handler(ScorekeeperError)
    async def scorekeeper_error_handler(request: Request, exc: ScorekeeperError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})

    def engine() -> Engine:
        return app.state.engine

    @app.get("/health", tags=["System"])
    def health_check() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    # ---------- match ----------

    @app.get("/match", response_model=StateOut, tags=["Match"])
    def get_match():
        return engine().snapshot()

    @app.post("/match", response_model=OutcomeOut, status_code=201, tags=["Match"])
    def create_match(body: MatchCreate):
        player1 = Player.create(body.player1_name)
        player2 = Player.create(body.player2_name)
        breaker = player1 if body.first_breaker == 1 else player2
        return engine().create_match(
            body.game_type,
            player1,
            player2,
            breaker,
            player1_target=body.player1_target,
            player2_target=body.player2_target,
        )

    @app.post("/match/end-turn", response_model=OutcomeOut, tags=["Match"])
    def end_turn():
        return engine().end_turn()

    @app.post("/match/game-over", response_model=OutcomeOut, tags=["Match"])
    def mark_game_over(body: GameOverIn):
        return engine().mark_game_over(body.winner_id)

    @app.post("/match/balls/{ball_index}", response_model=BallOut, tags=["Match"])
    def set_ball_state(ball_index: int):
        state = engine().set_ball_state(ball_index)
        return BallOut(ball_index=ball_index, state=state, balls=engine().ball_states())

    @app.post("/match/end", response_model=OutcomeOut, tags=["Match"])
    def end_match():
        return engine().end_match()

    @app.delete("/match", response_model=StateOut, tags=["Match"])
    def cancel_match():
        engine().cancel_match()
        return engine().snapshot()

    # ---------- history ----------

    @app.get("/matches/recent", tags=["History"])
    def recent_matches() -> List[Dict[str, Any]]:
        return [r.model_dump(mode="json") for r in engine().get_recent_matches()]

    @app.get("/matches/recent/{match_id}/quick-start", response_model=QuickStartOut, tags=["History"])
    def quick_start(match_id: str):
        for record in engine().get_recent_matches():
            if record.id == match_id:
                p1, p2, game_type = Engine.quick_start_from_history(record)
                return QuickStartOut(player1_name=p1, player2_name=p2, game_type=game_type)
        raise HTTPException(status_code=404, detail=f"No recent match {match_id}")

    @app.delete("/matches/recent", status_code=204, tags=["History"])
    def clear_recent_matches() -> None:
        engine().clear_history()

    # ---------- local data ----------

    @app.get("/promo/wrapped", tags=["Data"])
    def wrapped_promo() -> dict[str, bool]:
        return {"viewed": app.state.promo.has_viewed_wrapped()}

    @app.post("/promo/wrapped/viewed", tags=["Data"])
    def mark_wrapped_viewed() -> dict[str, bool]:
        return {"viewed": app.state.promo.mark_wrapped_viewed()}

    @app.delete("/data", status_code=204, tags=["Data"])
    def clear_all_data() -> None:
        """Wipe match history, cached stats and promo flags."""
        engine().clear_history()
        app.state.stats.clear_stats_data()
        app.state.promo.clear_wrapped_promo_data()
        logger.info("Cleared all local data")

    # ---------- stats ----------

    @app.get("/stats/{category}/sort-options", response_model=SortOptionsOut, tags=["Stats"])
    def sort_options(category: Category):
        return SortOptionsOut(
            category=category,
            options=[SortOptionOut(value=o.value, label=o.label) for o in SORT_OPTIONS[category]],
            default=default_sort(category),
        )

    @app.post("/stats/{category}/sort", response_model=SortResponse, tags=["Stats"])
    def sort_stats(category: Category, body: SortRequest):
        allowed = [o.value for o in SORT_OPTIONS[category]]
        mode = body.mode if body.mode in allowed else default_sort(category)
        describe = skill_difference_label if category is Category.SKILL_DIFFERENCE else None
        entries = [
            SortedEntry(
                key=k,
                label=describe(k) if describe else None,
                wins=v.wins,
                losses=v.losses,
                win_percent=win_percent(v.wins, v.losses),
            )
            for k, v in sort_entries(body.buckets, mode)
        ]
        return SortResponse(
            mode=mode,
            label=sort_label(category, mode),
            next_mode=cycle_sort(category, mode),
            entries=entries,
        )

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    cfg = load_config()
    logging.basicConfig(
        level=cfg["logging"]["level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "rackkeeper.api.main:create_app",
        factory=True,
        host=cfg["api"]["host"],
        port=int(cfg["api"]["port"]),
    )


if __name__ == "__main__":
    run()
