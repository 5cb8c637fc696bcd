from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from .command import get_groups_command
from .command.groups import Searcher
from .env_settings import EnvSettings, get_env
from .group import GroupSearcher
from .log_config import get_log_file, setup_logging
from .pack import PackDef

log = logging.getLogger(__name__)

PACK_NAME = "ldap"


def build_pack(env: EnvSettings, searcher: Searcher | None = None) -> PackDef:
    if searcher is None:
        searcher = GroupSearcher(env.ldap_config())
    return PackDef(
        name=PACK_NAME,
        commands=[get_groups_command(searcher, env.search_configuration())],
        help_url=env.pack_help_url,
    )


def create_app(env: EnvSettings | None = None, searcher: Searcher | None = None) -> FastAPI:
    env = env or get_env()
    setup_logging(level=env.log_level, log_dir=env.log_dir, retention_days=env.log_retention_days)

    pack = build_pack(env, searcher)
    app = FastAPI(title="LDAP pack")
    app.state.pack = pack
    app.state.log_file = get_log_file()

    @app.get("/")
    def pack_definition() -> dict:
        return pack.describe()

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/commands/{name}")
    async def run_command(name: str, request: Request) -> dict:
        command = pack.command(name)
        if command is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown command: {name}")
        body = await request.body()
        # Directory lookups block, keep them off the event loop.
        event = await run_in_threadpool(command.handler, body)
        log.info("Command %s -> %s", name, event.event_def.name)
        return event.to_dict()

    log.info("Pack %r ready, LDAP server %s, log file %s", pack.name, env.ldap_url, app.state.log_file or "-")
    return app
