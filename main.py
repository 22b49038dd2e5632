import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, List, Optional

import gridfs
from fastapi import BackgroundTasks, Body, Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

import auth
import database
import images
import theme as theme_css
import uploads
from autosave import Debouncer
from config import settings
from content import ContentStore
from defaults import SECTIONS
from logging_setup import configure_logging
from schemas import SECTION_MODELS

configure_logging(settings)
logger = logging.getLogger(__name__)
logger.info("Settings: %s", settings.asdict())

AUTOSAVE_KEY = "content"

store = ContentStore(
    collection=database.content_collection(),
    cache_path=settings.cache_path,
    row_id=settings.content_row_id,
)
debouncer = Debouncer(delay=settings.autosave_delay)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # don't lose the last burst of edits
    if debouncer.pending(AUTOSAVE_KEY):
        await run_in_threadpool(debouncer.flush, AUTOSAVE_KEY)
    debouncer.shutdown()


app = FastAPI(title="Portfolio Content API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Dependencies

def get_store() -> ContentStore:
    if not store.loaded:
        store.ensure_loaded()
    return store


def get_debouncer() -> Debouncer:
    return debouncer


def get_bucket() -> gridfs.GridFSBucket:
    bucket = database.files_bucket()
    if bucket is None:
        raise HTTPException(status_code=503, detail="File storage unavailable")
    return bucket


# Helpers

def now_ms() -> int:
    return int(time.time() * 1000)


def validate_section(section: str, payload: Any):
    if section not in SECTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown section '{section}'")
    adapter = TypeAdapter(SECTION_MODELS[section])
    try:
        value = adapter.validate_python(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return adapter.dump_python(value, mode="json")


def find_item(items: list, item_id: str, what: str = "Item") -> dict:
    for item in items:
        if item.get("id") == item_id:
            return item
    raise HTTPException(status_code=404, detail=f"{what} not found")


def save_status(s: ContentStore, d: Debouncer) -> dict:
    return {**s.status(), "pending": d.pending(AUTOSAVE_KEY)}


def commit(s: ContentStore, section: str, value: Any, background_tasks: BackgroundTasks) -> dict:
    content = s.apply(section, value)
    background_tasks.add_task(s.persist)
    return content


# Health
@app.get("/")
def read_root():
    return {"message": "Portfolio API running"}

@app.get("/test")
def test_database(s: ContentStore = Depends(get_store)):
    status = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "❌ Not Set" if not os.getenv("DATABASE_URL") else "✅ Set",
        "database_name": "❌ Not Set" if not os.getenv("DATABASE_NAME") else "✅ Set",
        "content_source": s.status()["source"],
        "collections": []
    }
    if database.db is None:
        return status
    try:
        status["collections"] = database.db.list_collection_names()
        status["database"] = "✅ Connected"
    except Exception as e:
        status["database"] = f"❌ Error: {str(e)[:80]}"
    return status

# Auth
class SignupRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=8)
    display_name: Optional[str] = None

class LoginRequest(BaseModel):
    email: str
    password: str

@app.post("/auth/signup")
def signup(payload: SignupRequest):
    user_id = auth.create_admin(payload.email, payload.password, payload.display_name)
    return {"id": user_id, "email": payload.email}

@app.post("/auth/login")
def login(payload: LoginRequest):
    session = auth.login(payload.email, payload.password)
    return {"token": session.token, "expires_at": session.expires_at.isoformat()}

@app.post("/auth/logout")
def logout(session: dict = Depends(auth.require_admin)):
    auth.logout(session["token"])
    return {"ok": True}

# Public content
@app.get("/content")
def get_content(s: ContentStore = Depends(get_store)):
    return s.content

@app.get("/profile")
def get_profile(s: ContentStore = Depends(get_store)):
    profile = s.content["profile"]
    return {**profile, "image": images.present(profile.get("profile_image"))}

@app.get("/home")
def get_home(s: ContentStore = Depends(get_store)):
    content = s.content
    return {**content["home"], "hero_image": images.present(content["theme"].get("hero_image"))}

@app.get("/testimonials")
def list_testimonials(s: ContentStore = Depends(get_store)):
    return [{**t, "avatar_image": images.present(t.get("avatar"))} for t in s.content["testimonials"]]

@app.get("/theme")
def get_theme(s: ContentStore = Depends(get_store)):
    current = s.content["theme"]
    return {**current, "css_variables": theme_css.css_variables(current)}

@app.get("/theme.css", response_class=PlainTextResponse)
def get_theme_css(s: ContentStore = Depends(get_store)):
    return PlainTextResponse(theme_css.render_css(s.content["theme"]), media_type="text/css")

@app.get("/albums")
def list_albums(s: ContentStore = Depends(get_store)):
    content = s.content
    albums = [
        {
            "id": a.get("id"),
            "title": a.get("title"),
            "description": a.get("description"),
            "date": a.get("date"),
            "cover": images.present(a.get("cover_image")),
            "pdf_url": a.get("pdf_url"),
            "photo_count": len(a["photos"]),
        }
        for a in content["albums"]
    ]
    return {"page": content["portfolio_page"], "albums": albums}

@app.get("/albums/{album_id}")
def get_album(album_id: str, s: ContentStore = Depends(get_store)):
    album = find_item(s.content["albums"], album_id, "Album")
    album["cover"] = images.present(album.get("cover_image"))
    album["photos"] = [{**p, "image": images.present(p.get("src"))} for p in album["photos"]]
    return album

@app.get("/writings")
def list_writings(s: ContentStore = Depends(get_store)):
    content = s.content
    writings = [
        {**{k: v for k, v in w.items() if k != "content"}, "cover": images.present(w.get("cover_image"))}
        for w in content["writings"]
    ]
    return {"page": content["writings_page"], "writings": writings}

@app.get("/writings/{writing_id}")
def get_writing(writing_id: str, s: ContentStore = Depends(get_store)):
    work = find_item(s.content["writings"], writing_id, "Writing")
    work["cover"] = images.present(work.get("cover_image"))
    return work

@app.get("/files/{name}")
def get_file(name: str, bucket: gridfs.GridFSBucket = Depends(get_bucket)):
    try:
        data, content_type = uploads.open_file(bucket, name)
    except gridfs.NoFile:
        raise HTTPException(status_code=404, detail="File not found")
    return Response(content=data, media_type=content_type, headers={"Cache-Control": "public, max-age=3600"})

# Admin: save status, drafts and maintenance
@app.get("/admin/status")
def get_save_status(s: ContentStore = Depends(get_store), d: Debouncer = Depends(get_debouncer),
                    _: dict = Depends(auth.require_admin)):
    return save_status(s, d)

@app.put("/admin/drafts/{section}")
def save_draft(section: str, payload: Any = Body(...), force: bool = False,
               s: ContentStore = Depends(get_store), d: Debouncer = Depends(get_debouncer),
               _: dict = Depends(auth.require_admin)):
    value = validate_section(section, payload)
    content = s.apply(section, value)
    if force:
        d.cancel(AUTOSAVE_KEY)
        s.persist()
    else:
        d.schedule(AUTOSAVE_KEY, s.persist)
    return {"section": section, "value": content[section], "status": save_status(s, d)}

@app.post("/admin/reset")
def reset_content(confirm: bool = False, s: ContentStore = Depends(get_store),
                  d: Debouncer = Depends(get_debouncer), _: dict = Depends(auth.require_admin)):
    if not confirm:
        raise HTTPException(status_code=400, detail="Pass confirm=true to reset all content")
    d.cancel(AUTOSAVE_KEY)
    ok = s.reset()
    return {"ok": ok, "status": save_status(s, d)}

# Admin: albums and photos
@app.post("/admin/albums")
def create_album(background_tasks: BackgroundTasks, s: ContentStore = Depends(get_store),
                 _: dict = Depends(auth.require_admin)):
    album = {
        "id": f"new-album-{now_ms()}",
        "title": "Novo Álbum",
        "description": "Descrição...",
        "date": str(datetime.now().year),
        "cover_image": "https://picsum.photos/800/600",
        "photos": [],
    }
    commit(s, "albums", [album] + s.content["albums"], background_tasks)
    return album

@app.delete("/admin/albums/{album_id}")
def delete_album(album_id: str, background_tasks: BackgroundTasks, s: ContentStore = Depends(get_store),
                 _: dict = Depends(auth.require_admin)):
    albums = s.content["albums"]
    find_item(albums, album_id, "Album")
    commit(s, "albums", [a for a in albums if a.get("id") != album_id], background_tasks)
    return {"ok": True}

@app.post("/admin/albums/{album_id}/photos")
def add_photo(album_id: str, background_tasks: BackgroundTasks, s: ContentStore = Depends(get_store),
              _: dict = Depends(auth.require_admin)):
    albums = s.content["albums"]
    album = find_item(albums, album_id, "Album")
    photo = {"id": f"p-{now_ms()}", "src": "https://picsum.photos/1200/800", "alt": "Nova foto", "caption": ""}
    album["photos"].append(photo)
    commit(s, "albums", albums, background_tasks)
    return photo

@app.delete("/admin/albums/{album_id}/photos/{photo_id}")
def delete_photo(album_id: str, photo_id: str, background_tasks: BackgroundTasks,
                 s: ContentStore = Depends(get_store), _: dict = Depends(auth.require_admin)):
    albums = s.content["albums"]
    album = find_item(albums, album_id, "Album")
    find_item(album["photos"], photo_id, "Photo")
    album["photos"] = [p for p in album["photos"] if p.get("id") != photo_id]
    commit(s, "albums", albums, background_tasks)
    return {"ok": True}

class FocalPointRequest(BaseModel):
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)

@app.put("/admin/albums/{album_id}/photos/{photo_id}/focal-point")
def set_focal_point(album_id: str, photo_id: str, payload: FocalPointRequest, background_tasks: BackgroundTasks,
                    s: ContentStore = Depends(get_store), d: Debouncer = Depends(get_debouncer),
                    _: dict = Depends(auth.require_admin)):
    albums = s.content["albums"]
    photo = find_item(find_item(albums, album_id, "Album")["photos"], photo_id, "Photo")
    if not photo.get("src"):
        raise HTTPException(status_code=400, detail="Photo has no image")
    photo["src"] = images.with_focal_point(photo["src"], payload.x, payload.y)
    d.cancel(AUTOSAVE_KEY)
    commit(s, "albums", albums, background_tasks)
    return {**photo, "image": images.present(photo["src"])}

@app.post("/admin/albums/{album_id}/uploads")
async def upload_photos(album_id: str, files: List[UploadFile] = File(...),
                        s: ContentStore = Depends(get_store), bucket: gridfs.GridFSBucket = Depends(get_bucket),
                        d: Debouncer = Depends(get_debouncer), _: dict = Depends(auth.require_admin)):
    find_item(s.content["albums"], album_id, "Album")

    new_photos, failed = [], []
    for f in files:
        try:
            # size is known up front for multipart uploads; skip reading oversized files
            if f.size is not None:
                uploads.check_upload(f.content_type, f.size, settings.max_photo_bytes, images_only=True)
            data = await f.read()
            uploads.check_upload(f.content_type, len(data), settings.max_photo_bytes, images_only=True)
            url = await run_in_threadpool(uploads.store_file, bucket, f.filename, data, f.content_type)
        except (uploads.UploadRejected, PyMongoError) as e:
            logger.error("Upload of %s failed: %s", f.filename, e)
            failed.append({"filename": f.filename, "error": str(e)})
            continue
        new_photos.append(uploads.photo_from_upload(f.filename, url))

    # re-read: other edits may have landed while files were uploading
    albums = s.content["albums"]
    album = find_item(albums, album_id, "Album")
    album["photos"].extend(new_photos)
    s.apply("albums", albums)
    await run_in_threadpool(s.persist)
    return {"photos": new_photos, "failed": failed, "status": save_status(s, d)}

@app.post("/admin/uploads")
async def upload_file(file: UploadFile = File(...), bucket: gridfs.GridFSBucket = Depends(get_bucket),
                      _: dict = Depends(auth.require_admin)):
    try:
        if file.size is not None:
            uploads.check_upload(file.content_type, file.size, settings.max_upload_bytes)
        data = await file.read()
        uploads.check_upload(file.content_type, len(data), settings.max_upload_bytes)
    except uploads.UploadRejected as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    url = await run_in_threadpool(uploads.store_file, bucket, file.filename, data, file.content_type)
    return {"url": url}

# Admin: writings and testimonials
@app.post("/admin/writings")
def create_writing(background_tasks: BackgroundTasks, s: ContentStore = Depends(get_store),
                   _: dict = Depends(auth.require_admin)):
    work = {
        "id": f"writing-{now_ms()}",
        "title": "Novo Texto",
        "category": "Crônica",
        "excerpt": "Resumo...",
        "content": "<p>Conteúdo do texto...</p>",
        "date": datetime.now().strftime("%d/%m/%Y"),
        "cover_image": "",
    }
    commit(s, "writings", [work] + s.content["writings"], background_tasks)
    return work

@app.delete("/admin/writings/{writing_id}")
def delete_writing(writing_id: str, background_tasks: BackgroundTasks, s: ContentStore = Depends(get_store),
                   _: dict = Depends(auth.require_admin)):
    writings = s.content["writings"]
    find_item(writings, writing_id, "Writing")
    commit(s, "writings", [w for w in writings if w.get("id") != writing_id], background_tasks)
    return {"ok": True}

@app.post("/admin/testimonials")
def create_testimonial(background_tasks: BackgroundTasks, s: ContentStore = Depends(get_store),
                       _: dict = Depends(auth.require_admin)):
    item = {"id": f"t-{now_ms()}", "name": "Novo Nome", "role": "Cargo", "text": "Depoimento...", "avatar": ""}
    commit(s, "testimonials", s.content["testimonials"] + [item], background_tasks)
    return item

@app.delete("/admin/testimonials/{testimonial_id}")
def delete_testimonial(testimonial_id: str, background_tasks: BackgroundTasks,
                       s: ContentStore = Depends(get_store), _: dict = Depends(auth.require_admin)):
    items = s.content["testimonials"]
    find_item(items, testimonial_id, "Testimonial")
    commit(s, "testimonials", [t for t in items if t.get("id") != testimonial_id], background_tasks)
    return {"ok": True}

# Admin: whole sections (declared last so the fixed paths above win)
@app.put("/admin/{section}")
def replace_section(section: str, background_tasks: BackgroundTasks, payload: Any = Body(...),
                    s: ContentStore = Depends(get_store), _: dict = Depends(auth.require_admin)):
    value = validate_section(section, payload)
    content = commit(s, section, value, background_tasks)
    return {"section": section, "value": content[section]}
