"""Article API endpoints."""

from fastapi import APIRouter, File, Query, UploadFile, status

from community.dependencies import (
    ArticleServiceDep,
    AuthenticatedSessionDep,
    ImageServiceDep,
    SessionDep,
    SettingsDep,
)
from community.models.api import ArticleCreateRequest, ArticleListResponse, ArticleUpdateRequest
from community.models.article import Article
from community.services.image_service import UploadedImage

router = APIRouter()


@router.get("/articles", response_model=ArticleListResponse)
async def list_articles(
    session: SessionDep,
    article_service: ArticleServiceDep,
    settings: SettingsDep,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int | None = Query(None, ge=1, le=100, description="Items per page"),
):
    """
    List articles, newest publication first.

    Anonymous callers and visitors only see published articles.
    """
    page_size = page_size or settings.articles_page_size
    articles, total = await article_service.list_articles(session, page=page, page_size=page_size)
    return ArticleListResponse(articles=articles, total=total, page=page, page_size=page_size)


@router.get("/articles/{article_id}", response_model=Article)
async def get_article(
    article_id: str,
    session: SessionDep,
    article_service: ArticleServiceDep,
):
    """Get an article by ID."""
    return await article_service.get_article(session, article_id)


@router.post("/articles", response_model=Article, status_code=status.HTTP_201_CREATED)
async def create_article(
    request: ArticleCreateRequest,
    session: AuthenticatedSessionDep,
    article_service: ArticleServiceDep,
):
    """Create an article (approved volunteers and admins)."""
    return await article_service.create_article(
        session,
        title=request.title,
        content=request.content,
        tags=request.tags,
        status=request.status,
        read_time=request.read_time,
    )


@router.put("/articles/{article_id}", response_model=Article)
async def update_article(
    article_id: str,
    request: ArticleUpdateRequest,
    session: AuthenticatedSessionDep,
    article_service: ArticleServiceDep,
):
    """Update an article (its volunteer author or any admin)."""
    fields = request.model_dump(exclude_unset=True)
    return await article_service.update_article(session, article_id, fields)


@router.delete("/articles/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_article(
    article_id: str,
    session: AuthenticatedSessionDep,
    article_service: ArticleServiceDep,
):
    """Delete an article (its volunteer author or any admin)."""
    await article_service.delete_article(session, article_id)


@router.post("/articles/images", response_model=UploadedImage, status_code=status.HTTP_201_CREATED)
async def upload_article_image(
    session: AuthenticatedSessionDep,
    image_service: ImageServiceDep,
    file: UploadFile = File(...),
):
    """Upload an image for embedding in article content."""
    content = await file.read()
    return await image_service.upload_image(
        session,
        filename=file.filename or "image",
        content_type=file.content_type,
        data=content,
    )
