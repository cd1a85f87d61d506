"""Blog API: ownership-scoped CRUD.

- POST   /blog/create           → create a blog authored by the requester
- DELETE /blog/delete/{blog_id} → delete one of the requester's blogs
- PUT    /blog/update/{blog_id} → edit title/description of one of them
- GET    /blog/myblogs          → list the requester's blogs

Every route depends on get_current_user; the identity it returns is the
only source of the author id. An `author` field in the body is ignored.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkpot.auth.dependencies import CurrentIdentity, get_current_user, read_json_body
from inkpot.db.engine import get_db
from inkpot.schemas.blog import BlogRead, parse_blog_id, validate_blog_input
from inkpot.services.blog_service import BlogService

router = APIRouter(prefix="/blog")


def _svc(db: AsyncSession = Depends(get_db)) -> BlogService:
    return BlogService(db)


@router.post("/create", status_code=201)
async def create_blog(
    identity: CurrentIdentity = Depends(get_current_user),
    body: dict = Depends(read_json_body),
    svc: BlogService = Depends(_svc),
):
    data = validate_blog_input(body)
    blog = await svc.create(identity.user_id, data.title, data.description)
    return {
        "message": "Blog created successfully",
        "blog": BlogRead.model_validate(blog),
    }


@router.delete("/delete/{blog_id}")
async def delete_blog(
    blog_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: BlogService = Depends(_svc),
):
    bid = parse_blog_id(blog_id)
    await svc.delete_owned(identity.user_id, bid)
    return {"message": "Blog deleted successfully"}


@router.put("/update/{blog_id}")
async def update_blog(
    blog_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    body: dict = Depends(read_json_body),
    svc: BlogService = Depends(_svc),
):
    """Replace title and description. Both are required."""
    data = validate_blog_input(body)
    bid = parse_blog_id(blog_id)
    blog = await svc.update_owned(identity.user_id, bid, data.title, data.description)
    return {
        "message": "Blog updated successfully",
        "blog": BlogRead.model_validate(blog),
    }


@router.get("/myblogs")
async def my_blogs(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: BlogService = Depends(_svc),
):
    """List the requester's blogs, newest first. Empty list when none."""
    blogs = await svc.list_owned(identity.user_id)
    return {"blogs": [BlogRead.model_validate(b) for b in blogs]}
