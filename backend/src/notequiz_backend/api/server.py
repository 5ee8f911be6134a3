"""
Note Quiz 后端 API（FastAPI）。

约定：
- 服务端口：8080
- 音频：`/audio/{音名}.mp3`，由静态目录直接提供（后端不解码、不播放）。

API 设计原则：
- 无会话、无持久化：每个请求独立，题目状态（noteIdx / correctGuessPos）由前端回传。
- index 越界显式返回 400，不做截断或回绕。
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, StrictInt

from ..domain.catalog import GUESS_COUNT, LockedRandom, NoteCatalog, NoteIndexOutOfRange
from ..settings import Settings


logger = logging.getLogger(__name__)

router = APIRouter()


class CheckTextPositionRequest(BaseModel):
    noteIdx: StrictInt
    userNext: str
    userPrevious: str
    userPosition: StrictInt


class PrepareSoundTestRequest(BaseModel):
    noteIdx: StrictInt


class CheckSoundGuessRequest(BaseModel):
    correctGuessPos: StrictInt = Field(ge=0, le=GUESS_COUNT - 1)
    userSoundGuessPos: StrictInt = Field(ge=0, le=GUESS_COUNT - 1)


def get_catalog(request: Request) -> NoteCatalog:
    return request.app.state.catalog


def _out_of_range(e: NoteIndexOutOfRange) -> HTTPException:
    logger.warning("拒绝越界 noteIdx=%s", e.index)
    return HTTPException(status_code=400, detail=str(e))


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/api/notes")
def api_list_notes(catalog: NoteCatalog = Depends(get_catalog)) -> list[dict[str, Any]]:
    return [n.to_dict() for n in catalog.notes()]


@router.post("/api/note/new")
def api_new_note(catalog: NoteCatalog = Depends(get_catalog)) -> dict[str, Any]:
    note = catalog.random_note()
    logger.debug("new note idx=%d name=%s", note.index, note.name)
    out = note.to_dict()
    out["nextNote"] = catalog.next_name(note.index)
    out["previousNote"] = catalog.previous_name(note.index)
    return out


@router.post("/api/note/check_text_position")
def api_check_text_position(req: CheckTextPositionRequest, catalog: NoteCatalog = Depends(get_catalog)) -> dict[str, Any]:
    try:
        result = catalog.check_text_position(
            req.noteIdx,
            provided_next=req.userNext,
            provided_previous=req.userPrevious,
            provided_position=req.userPosition,
        )
    except NoteIndexOutOfRange as e:
        raise _out_of_range(e) from e
    return result.to_dict()


@router.post("/api/note/prepare_sound_test")
def api_prepare_sound_test(req: PrepareSoundTestRequest, catalog: NoteCatalog = Depends(get_catalog)) -> dict[str, Any]:
    try:
        guess_notes, correct_pos = catalog.distractor_set(req.noteIdx)
    except NoteIndexOutOfRange as e:
        raise _out_of_range(e) from e
    logger.debug("sound test idx=%d correct_pos=%d", req.noteIdx, correct_pos)
    return {"guessNotes": [n.to_dict() for n in guess_notes], "correctGuessPos": correct_pos}


@router.post("/api/note/check_sound_guess")
def api_check_sound_guess(req: CheckSoundGuessRequest) -> dict[str, bool]:
    return {"soundCorrect": NoteCatalog.check_guess(req.correctGuessPos, req.userSoundGuessPos)}


def create_app(settings: Settings | None = None, *, catalog: NoteCatalog | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Note Quiz Backend", version="0.1.0")
    app.state.settings = settings
    app.state.catalog = catalog or NoteCatalog(
        LockedRandom(settings.seed),
        audio_url_prefix=settings.audio_url_prefix,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    if settings.audio_dir is None:
        logger.warning("未配置音频目录（非源码布局需设置 NOTEQUIZ_AUDIO_DIR），未挂载 %s", settings.audio_url_prefix)
    elif settings.audio_dir.is_dir():
        app.mount(settings.audio_url_prefix, StaticFiles(directory=str(settings.audio_dir)), name="audio")
        logger.info("音频目录：%s -> %s", settings.audio_url_prefix, settings.audio_dir)
    else:
        logger.warning("音频目录不存在，未挂载 %s：%s", settings.audio_url_prefix, settings.audio_dir)

    return app


app = create_app()
