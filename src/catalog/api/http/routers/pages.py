"""HTML pages listing the stored products."""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.templating import Jinja2Templates

from catalog.api.http.app_data import ApplicationDependencies
from catalog.api.http.deps import get_app_dependencies, get_product_repository
from catalog.entities.product import ProductRepository

_HTTP_DIR = Path(__file__).resolve().parent.parent
STATIC_DIR = _HTTP_DIR / "static"

templates = Jinja2Templates(directory=str(_HTTP_DIR / "templates"))

router = APIRouter(tags=["pages"])


def _render_product_list(
    request: Request,
    repository: ProductRepository,
    app_deps: ApplicationDependencies,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "product_list.html",
        {"title": app_deps.config.app.title, "products": repository.list_all()},
    )


@router.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    repository: ProductRepository = Depends(get_product_repository),
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> HTMLResponse:
    return _render_product_list(request, repository, app_deps)


@router.get("/hello/{name}", response_class=HTMLResponse)
def hello(
    name: str,
    request: Request,
    repository: ProductRepository = Depends(get_product_repository),
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> HTMLResponse:
    """Same page as ``/``; the name is ignored."""
    return _render_product_list(request, repository, app_deps)


@router.get("/products", response_class=HTMLResponse)
def product_list(
    request: Request,
    repository: ProductRepository = Depends(get_product_repository),
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> HTMLResponse:
    return _render_product_list(request, repository, app_deps)


@router.get("/main.css", include_in_schema=False)
def stylesheet() -> FileResponse:
    return FileResponse(STATIC_DIR / "main.css", media_type="text/css")
