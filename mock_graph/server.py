from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from mock_graph.data_seed import (
    APP_ID,
    APP_SECRET,
    ISSUED_EXPIRES,
    ISSUED_TOKEN,
    OAUTH_CODE,
    generate_seed,
)

JAVASCRIPT = "text/javascript; charset=UTF-8"

app = FastAPI()
seed = generate_seed()

app.state.seed = seed


def reset_metrics() -> None:
    app.state.metrics = {
        "graph_get": 0,
        "graph_post": 0,
        "graph_delete": 0,
        "oauth": 0,
        "legacy_rest": 0,
    }
    app.state.requests = []
    seed.update(generate_seed())


reset_metrics()


def _javascript(content: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=headers, media_type=JAVASCRIPT)


def _oauth_error(message: str = "Invalid OAuth access token.") -> JSONResponse:
    return _javascript({"error": {"type": "OAuthException", "message": message}}, status_code=400)


def _record(request: Request, form: Dict[str, str]) -> None:
    app.state.requests.append(
        {
            "method": request.method,
            "host": request.headers.get("host", ""),
            "path": request.url.path,
            "query": dict(request.query_params),
            "form": form,
            "content_type": request.headers.get("content-type", ""),
        }
    )


async def _read_form(request: Request) -> Dict[str, str]:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/x-www-form-urlencoded"):
        return {}
    body = await request.body()
    return dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))


def _viewer(request: Request) -> Tuple[bool, Optional[str]]:
    token = request.query_params.get("access_token")
    if token is None or token not in seed["tokens"]:
        return False, None
    return True, seed["tokens"][token]


def _parse_multipart(content_type: str, body: bytes) -> Tuple[Dict[str, str], Dict[str, Dict[str, Any]]]:
    boundary = content_type.split("boundary=", 1)[1].strip()
    delimiter = f"--{boundary}".encode("utf-8")
    fields: Dict[str, str] = {}
    files: Dict[str, Dict[str, Any]] = {}
    for raw_part in body.split(delimiter):
        part = raw_part.strip(b"\r\n")
        if not part or part == b"--":
            continue
        raw_headers, _, payload = part.partition(b"\r\n\r\n")
        headers: Dict[str, str] = {}
        for line in raw_headers.decode("utf-8").split("\r\n"):
            key, _, value = line.partition(":")
            headers[key.strip().lower()] = value.strip()
        disposition = headers.get("content-disposition", "")
        params = dict(
            item.strip().split("=", 1) for item in disposition.split(";")[1:] if "=" in item
        )
        name = params.get("name", "").strip('"')
        if "filename" in params:
            files[name] = {
                "filename": params["filename"].strip('"'),
                "content_type": headers.get("content-type", ""),
                "size": len(payload),
                "sha1": hashlib.sha1(payload).hexdigest(),
            }
        else:
            fields[name] = payload.decode("utf-8")
    return fields, files


def _select_fields(obj: Dict[str, Any], fields: Optional[str]) -> Dict[str, Any]:
    if not fields:
        return dict(obj)
    wanted = [field.strip() for field in fields.split(",") if field.strip()]
    return {key: obj[key] for key in wanted if key in obj}


@app.get("/oauth/access_token")
async def oauth_access_token(request: Request) -> Response:
    app.state.metrics["oauth"] += 1
    _record(request, {})
    params = request.query_params
    if params.get("client_id") != APP_ID or params.get("client_secret") != APP_SECRET:
        return _oauth_error("Error validating client secret.")
    if params.get("code") != OAUTH_CODE:
        return _oauth_error("Invalid verification code format.")
    return PlainTextResponse(f"access_token={ISSUED_TOKEN}&expires={ISSUED_EXPIRES}")


@app.api_route("/method/{name}", methods=["GET", "POST"])
async def legacy_rest(name: str, request: Request) -> JSONResponse:
    app.state.metrics["legacy_rest"] += 1
    form = await _read_form(request)
    _record(request, form)
    valid, user_id = _viewer(request)
    if not valid:
        return _javascript({"error_code": 190, "error_msg": "Invalid OAuth 2.0 Access Token"})
    method = (form.get("method") or request.query_params.get("method") or name).lower()
    if method == "admin.getmetrics":
        return _javascript({"error_code": 4, "error_msg": "Application request limit reached"})
    if method == "users.getinfo":
        uids = (form.get("uids") or request.query_params.get("uids") or (user_id or "")).split(",")
        return _javascript([seed["users"][uid] for uid in uids if uid in seed["users"]])
    if method == "status.set":
        return _javascript(True)
    return _javascript({"error_code": 3, "error_msg": f"Unknown method: {method}"})


@app.get("/broken")
async def broken() -> Response:
    return Response("<html><body>Bad Gateway</body></html>", status_code=502, media_type="text/html")


@app.get("/{object_id}")
async def graph_object(object_id: str, request: Request) -> Response:
    app.state.metrics["graph_get"] += 1
    _record(request, {})
    valid, user_id = _viewer(request)
    if not valid:
        return _oauth_error()
    target = user_id if object_id == "me" else object_id
    obj = seed["users"].get(target or "")
    if obj is None:
        return _javascript(
            {"error": {"type": "GraphMethodException", "message": "Unsupported get request."}}, status_code=400
        )
    payload = _select_fields(obj, request.query_params.get("fields"))
    etag = hashlib.md5(json.dumps(payload, sort_keys=True).encode("utf-8")).hexdigest()
    if request.headers.get("if-none-match") == f'"{etag}"':
        return Response(status_code=304, headers={"ETag": f'"{etag}"'})
    return _javascript(payload, headers={"ETag": f'"{etag}"'})


@app.get("/{object_id}/feed")
async def graph_feed(object_id: str, request: Request) -> JSONResponse:
    app.state.metrics["graph_get"] += 1
    _record(request, {})
    valid, user_id = _viewer(request)
    if not valid:
        return _oauth_error()
    target = user_id if object_id == "me" else object_id
    posts: List[Dict[str, Any]] = seed["feed"].get(target or "", [])
    limit = int(request.query_params.get("limit", "25"))
    offset = int(request.query_params.get("offset", "0"))
    page = posts[offset : offset + limit]
    payload: Dict[str, Any] = {"data": page}
    if offset + limit < len(posts):
        payload["paging"] = {
            "next": f"https://graph.facebook.com/{object_id}/feed?limit={limit}&offset={offset + limit}"
        }
    return _javascript(payload)


@app.post("/{object_id}/feed")
async def graph_publish(object_id: str, request: Request) -> JSONResponse:
    app.state.metrics["graph_post"] += 1
    form = await _read_form(request)
    _record(request, form)
    valid, user_id = _viewer(request)
    if not valid:
        return _oauth_error()
    if not form.get("message"):
        return _javascript(
            {"error": {"type": "FacebookApiException", "message": "(#100) Missing message or attachment"}},
            status_code=400,
        )
    target = user_id if object_id == "me" else object_id
    posts = seed["feed"].setdefault(target or "", [])
    post = {"id": f"{target}_{100 + len(posts)}", "message": form["message"]}
    posts.append(post)
    return _javascript({"id": post["id"]})


@app.post("/{object_id}/photos")
async def graph_photos(object_id: str, request: Request) -> JSONResponse:
    app.state.metrics["graph_post"] += 1
    content_type = request.headers.get("content-type", "")
    body = await request.body()
    _record(request, {})
    valid, user_id = _viewer(request)
    if not valid:
        return _oauth_error()
    if not content_type.startswith("multipart/form-data"):
        return _javascript(
            {"error": {"type": "OAuthException", "message": "(#324) Requires upload file"}}, status_code=400
        )
    fields, files = _parse_multipart(content_type, body)
    return _javascript({"id": f"{user_id}_photo", "fields": fields, "files": files})


@app.delete("/{object_id}")
async def graph_delete(object_id: str, request: Request) -> JSONResponse:
    app.state.metrics["graph_delete"] += 1
    _record(request, {})
    valid, user_id = _viewer(request)
    if not valid:
        return _oauth_error()
    posts = seed["feed"].get(user_id or "", [])
    for post in list(posts):
        if post["id"] == object_id:
            posts.remove(post)
            return _javascript(True)
    return _javascript(False)
