"""Minimal HTML form front-end using aiohttp.

A thin shell over the same command handlers the CLI uses: the handlers
return structured results and this module only decides how to show them.
Registry calls are blocking, so each one runs in the default executor.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, Optional

from aiohttp import web

from config import AppConfig
from constants import Constants
import commands

logger = logging.getLogger(__name__)

ECOSYSTEM_OPTIONS = (("pypi", "pypi"), ("composer", "composer"), ("oss", "oss (GitHub)"))

PAGE_STYLE = """
    body { font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; margin: 20px; }
    h1 { margin-top: 0; }
    .section { border: 1px solid #ccc; padding: 12px 16px; border-radius: 10px; margin-bottom: 20px; }
    label { display: block; margin-top: 6px; }
    input[type=text] { width: 320px; padding: 4px; }
    select { padding: 4px; }
    button { margin-top: 8px; padding: 6px 10px; cursor: pointer; }
    textarea { width: 100%; height: 260px; font-family: monospace; font-size: 12px; }
    pre { background: #f7f7f7; padding: 10px; border-radius: 6px; overflow-x: auto; }
    .error { color: #a00; }
"""


@dataclass
class FormOutcome:
    """What a form submission produced: JSON output, text output, or an error."""
    output: Any = None
    message: str = ""
    error: str = ""
    params: Dict[str, str] = field(default_factory=dict)


def run_action(config: AppConfig, params: Dict[str, str]) -> FormOutcome:
    """Execute one form action synchronously.

    Args:
        config: Runtime configuration.
        params: Query parameters (action, ecosystem, name, version, query, topic).
    """
    action = params.get("action", "")
    eco = params.get("ecosystem", "")
    name = params.get("name", "")
    version = params.get("version", "") or None
    outcome = FormOutcome(params=params)

    result = None
    if action == "info" and eco and name:
        result = commands.cmd_info(config, eco, name)
        if result.ok:
            outcome.output = result.data
    elif action == "deps" and eco and name:
        result = commands.cmd_deps(config, eco, name, version)
        if result.ok:
            outcome.output = result.data
    elif action == "search_oss" and params.get("query"):
        result = commands.cmd_search(config, params["query"])
        if result.ok:
            outcome.message = "\n".join(result.lines)
    elif action == "crawl_topic" and params.get("topic"):
        topic = params["topic"]
        tmp = os.path.join(tempfile.gettempdir(), "crawl-" + re.sub(r"\W+", "_", topic) + ".json")
        result = commands.cmd_crawl_tag(config, topic, tmp, Constants.WEB_CRAWL_TOPIC_RESULTS)
        if result.ok and result.data is not None:
            outcome.output = result.data
        elif result.ok:
            outcome.message = "\n".join(result.lines)

    if result is not None and not result.ok:
        outcome.error = result.error or "Request failed."
    return outcome


def _selected(current: str, value: str) -> str:
    return " selected" if current == value else ""


def render_page(outcome: FormOutcome) -> str:
    """Render the full HTML page; every user-supplied value is escaped."""
    p = outcome.params
    eco = p.get('ecosystem', '')
    action = p.get('action', '')
    options = "\n".join(
        f'          <option value="{value}"{_selected(eco, value)}>{escape(label)}</option>'
        for value, label in ECOSYSTEM_OPTIONS
    )
    sections = []
    if outcome.error:
        sections.append(
            '  <div class="section">\n    <h2>Error</h2>\n'
            f'    <p class="error">{escape(outcome.error)}</p>\n  </div>'
        )
    if outcome.message:
        sections.append(
            '  <div class="section">\n    <h2>Text Output</h2>\n'
            f"    <pre>{escape(outcome.message)}</pre>\n  </div>"
        )
    if outcome.output is not None:
        dumped = json.dumps(outcome.output, ensure_ascii=False, indent=4)
        sections.append(
            '  <div class="section">\n    <h2>Result JSON</h2>\n'
            f"    <textarea readonly>{escape(dumped)}</textarea>\n  </div>"
        )

    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>MetaPkg GUI</title>
  <style>{PAGE_STYLE}  </style>
</head>
<body>
  <h1>MetaPkg - Web UI</h1>
  <p><strong>Hint:</strong> From CLI use: <code>metapkg help</code></p>

  <div class="section">
    <h2>Package Info / Deps</h2>
    <form method="get">
      <label>
        Action:
        <select name="action">
          <option value="info"{_selected(action, 'info')}>Info</option>
          <option value="deps"{_selected(action, 'deps')}>Dependencies</option>
        </select>
      </label>
      <label>
        Ecosystem:
        <select name="ecosystem">
{options}
        </select>
      </label>
      <label>
        Name (e.g. <code>requests</code>, <code>monolog/monolog</code>, <code>owner/repo</code>):
        <input type="text" name="name" value="{escape(p.get('name', ''))}" required>
      </label>
      <label>
        Version (optional; leave empty for latest):
        <input type="text" name="version" value="{escape(p.get('version', ''))}">
      </label>
      <button type="submit">Run</button>
    </form>
  </div>

  <div class="section">
    <h2>Search OSS (GitHub)</h2>
    <form method="get">
      <input type="hidden" name="action" value="search_oss">
      <label>
        Query:
        <input type="text" name="query" value="{escape(p.get('query', ''))}" placeholder="json library, backup tool, etc.">
      </label>
      <button type="submit">Search</button>
    </form>
  </div>

  <div class="section">
    <h2>Crawl GitHub by Topic (Tag)</h2>
    <form method="get">
      <input type="hidden" name="action" value="crawl_topic">
      <label>
        Topic (e.g. <code>backup</code>, <code>monitoring</code>, <code>cli</code>):
        <input type="text" name="topic" value="{escape(p.get('topic', ''))}" required>
      </label>
      <button type="submit">Crawl</button>
    </form>
  </div>

{chr(10).join(sections)}
</body>
</html>
"""


class MetaPkgWebServer:
    """aiohttp application serving the form at ``/``."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()
        self._app: Optional[web.Application] = None

    def _create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self._index)
        app.router.add_get("/health", self._health_check)
        return app

    @property
    def app(self) -> web.Application:
        if self._app is None:
            self._app = self._create_app()
        return self._app

    async def _health_check(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})

    async def _index(self, request: web.Request) -> web.Response:
        params = {key: value.strip() for key, value in request.query.items()}
        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, run_action, self._config, params)
        if params.get("action"):
            logger.info(
                "Form request: %s %s -> %s",
                params.get("action"),
                params.get("name") or params.get("query") or params.get("topic") or "",
                "error" if outcome.error else "ok",
            )
        return web.Response(text=render_page(outcome), content_type="text/html")


def run_server(config: AppConfig, host: str = Constants.WEB_HOST, port: int = Constants.WEB_PORT) -> None:
    """Serve the form until interrupted."""
    server = MetaPkgWebServer(config)
    logger.info("Web UI listening on http://%s:%s", host, port)
    web.run_app(server.app, host=host, port=port, print=None)
