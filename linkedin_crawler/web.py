"""
Web trigger - start a crawl over HTTP and stream its output back as NDJSON.

Every job runs the CLI in its own child process, so each one gets its own
browser session. Stream events:

    {"type": "log", "msg": "..."}
    {"type": "done", "data": {"ok", "message", "csv_path", "started_at", "ended_at", "results"}}
"""

import asyncio
import json
import logging
import os
import sys
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import FileResponse, StreamingResponse
from pydantic import BaseModel, ValidationError

from linkedin_crawler import config
from linkedin_crawler.constants import EventType
from linkedin_crawler.exceptions import InvalidInput
from linkedin_crawler.logging_config import setup_logging
from linkedin_crawler.models import CrawlOptions
from linkedin_crawler.sink import find_latest_csv, read_csv_preview
from linkedin_crawler.utils import mask_args

logger = logging.getLogger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"
STREAM_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}

app = FastAPI(title="LinkedIn People Search Crawler")


class RunPayload(BaseModel):
    email: str = ""
    password: str = ""
    query: str = ""
    max_pages: int = config.DEFAULT_MAX_PAGES
    headless: bool = True
    send_invites: bool = False
    dump_html: bool = False
    out_dir: str = config.DEFAULT_OUT_DIR

    def to_options(self) -> CrawlOptions:
        return CrawlOptions(
            email=self.email,
            password=self.password,
            query=self.query,
            max_pages=self.max_pages,
            headless=self.headless,
            send_invites=self.send_invites,
            out_dir=self.out_dir,
            dump_html=self.dump_html,
        )


# ── helpers ───────────────────────────────────────────────────────

def _now() -> str:
    return datetime.now().strftime(config.CAPTURED_AT_FORMAT)


def log_event(msg: str) -> bytes:
    return (json.dumps({"type": EventType.LOG.value, "msg": msg}, ensure_ascii=False) + "\n").encode("utf-8")


def done_event(
    ok: bool,
    message: str,
    started_at: str,
    csv_path: str = "",
    results: list[dict] | None = None,
) -> bytes:
    data = {
        "ok": ok,
        "message": message,
        "csv_path": csv_path,
        "started_at": started_at,
        "ended_at": _now(),
        "results": results or [],
    }
    return (json.dumps({"type": EventType.DONE.value, "data": data}, ensure_ascii=False) + "\n").encode("utf-8")


def build_command(options: CrawlOptions) -> list[str]:
    """Command line for one crawl: CRAWLER_BIN if it exists, else this interpreter."""
    if config.CRAWLER_BIN and Path(config.CRAWLER_BIN).is_file():
        command = [config.CRAWLER_BIN]
    else:
        command = [sys.executable, "-u", "-m", "scripts.crawl"]

    command += [
        "--email", options.email,
        "--password", options.password,
        "--query", options.query,
        "--max-pages", str(options.max_pages),
        "--out-dir", options.out_dir,
        "--headless" if options.headless else "--no-headless",
    ]
    if options.send_invites:
        command.append("--send-invites")
    if options.dump_html:
        command.append("--dump-html")
    return command


def _preview(out_dir: str) -> tuple[str, list[dict]]:
    csv_path = find_latest_csv(out_dir)
    if not csv_path:
        return "", []
    try:
        return str(csv_path), read_csv_preview(csv_path)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {csv_path} for preview: {e}")
        return str(csv_path), []


async def stream_job(options: CrawlOptions) -> AsyncIterator[bytes]:
    """Run the CLI as a child process and relay its output line by line."""
    started_at = _now()
    command = build_command(options)
    yield log_event(f"▶ Runner: {' '.join(mask_args(command))}")

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            env={**os.environ, "PYTHONUNBUFFERED": "1", "PYTHONIOENCODING": "utf-8"},
        )
    except OSError as e:
        yield log_event(f"❌ Could not start crawler: {e}")
        yield done_event(False, f"Could not start crawler: {e}", started_at)
        return

    try:
        async for raw_line in process.stdout:
            line = raw_line.decode("utf-8", errors="replace").rstrip("\r\n")
            if line:
                yield log_event(line)
        returncode = await process.wait()
    finally:
        # Client went away mid-stream
        if process.returncode is None:
            process.kill()
            await process.wait()

    if returncode != 0:
        yield done_event(False, f"Crawler exited with code {returncode}", started_at)
        return

    csv_path, results = _preview(options.out_dir)
    yield done_event(True, "Crawl finished", started_at, csv_path=csv_path, results=results)


async def _reject(message: str) -> AsyncIterator[bytes]:
    started_at = _now()
    yield log_event(f"❌ {message}")
    yield done_event(False, message, started_at)


def _stream(body: AsyncIterator[bytes]) -> StreamingResponse:
    return StreamingResponse(body, media_type=NDJSON_MEDIA_TYPE, headers=STREAM_HEADERS)


# ── routes ────────────────────────────────────────────────────────

@app.post("/run")
async def run(request: Request):
    """Start a crawl and stream its log. Bad input is reported in-stream."""
    try:
        payload = RunPayload.model_validate(await request.json())
    except ValueError as e:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        message = "Invalid job payload" if isinstance(e, ValidationError) else "Invalid JSON body"
        return _stream(_reject(f"{message}: {e}"))

    options = payload.to_options()
    try:
        options.validate()
    except InvalidInput as e:
        return _stream(_reject(str(e)))

    logger.info(f"Starting crawl for query {options.query!r}")
    return _stream(stream_job(options))


@app.get("/download")
async def download(path: str = Query("")):
    if not path:
        raise HTTPException(status_code=400, detail="Missing path")
    file_path = Path(path)
    if not file_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(file_path, media_type="text/csv", filename=file_path.name)


@app.get("/health")
async def health():
    return {"status": "ok"}


def main():
    """Console script entry point."""
    setup_logging()
    logger.info(f"🌐 Listening on http://{config.WEB_HOST}:{config.WEB_PORT}")
    uvicorn.run(app, host=config.WEB_HOST, port=config.WEB_PORT)


if __name__ == "__main__":
    main()
